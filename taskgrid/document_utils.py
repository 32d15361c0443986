"""Turning a task document into an ordered list of tasks."""

import logging
from typing import Iterable, Optional, Union

from .annotation_utils import annotate_task
from .errors import MalformedHeader, MissingContext, TaskGridError
from .grammar_utils import parse_date, parse_weekday, resolve_weekday
from .models import ParseContext, Task

LOG = logging.getLogger(__name__)

SECTION_MARKER = '# '
DAY_MARKER = '## '
TASK_MARKER = '- [ ]'
CONTINUATION_MARKER = ' '

ON_ERROR_CHOICES = ('raise', 'skip')


def read_section_header(line: str, context: ParseContext) -> ParseContext:
    """A '# ' line sets the week anchor, or clears it when the line has no date."""
    return context.model_copy(update={'week_anchor': parse_date(line)})


def read_day_header(line: str, context: ParseContext) -> ParseContext:
    """A '## ' line moves the current date to the named weekday of the anchored week."""
    weekday = parse_weekday(line)
    if context.week_anchor is None:
        raise MalformedHeader("Invalid or missing '# ' date before day header")
    return context.model_copy(update={
        'current_date': resolve_weekday(context.week_anchor, weekday)
    })


def scan_document(
    document: Union[str, Iterable[str]],
    context: Optional[ParseContext] = None,
    on_error: str = 'raise',
) -> tuple[list[Task], ParseContext]:
    """
    Parse a task document line by line.

    Line rules:
    - '# ...MM/DD/YY...' anchors the week
    - '## Weekday' selects the day, the first one on/after the anchor
    - '- [ ] ...' starts a task on the selected day
    - ' ...' (leading space) adds to the most recent task
    - anything else is ignored

    Args:
        document: The whole text, or an iterable of lines
        context: Date context to start from (empty by default)
        on_error: 'raise' aborts on the first error, 'skip' drops the
            offending task (or day) and keeps going

    Returns:
        Tasks in document order, and the context after the last line
    """
    if on_error not in ON_ERROR_CHOICES:
        raise ValueError(f"on_error must be one of {ON_ERROR_CHOICES}, got {on_error!r}")

    lines = document.splitlines() if isinstance(document, str) else document
    context = context if context is not None else ParseContext()

    tasks: list[Task] = []
    current: Optional[Task] = None
    dropped = False  # the most recent task block was skipped

    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.rstrip('\r\n')
        try:
            if line.startswith(SECTION_MARKER):
                context = read_section_header(line, context)
            elif line.startswith(DAY_MARKER):
                context = read_day_header(line, context)
            elif line.startswith(TASK_MARKER):
                current = None
                dropped = False
                if context.current_date is None:
                    raise MissingContext('No current date parsed yet')
                task = Task(date=context.current_date)
                annotate_task(line[len(TASK_MARKER):], task)
                tasks.append(task)
                current = task
            elif not line.strip():
                continue
            elif line.startswith(CONTINUATION_MARKER):
                if current is None:
                    if dropped:
                        LOG.debug('Ignoring line %d of a skipped task: %s', line_number, line)
                        continue
                    raise MissingContext('Continuation line before any task')
                annotate_task(line, current)
            else:
                LOG.debug('Ignoring line %d: %s', line_number, line)
        except TaskGridError as err:
            err.at_line(line_number, line)
            if on_error == 'raise':
                raise

            LOG.warning('Skipping after error: %s', err)
            if line.startswith(DAY_MARKER):
                # Tasks below a bad day header must not land on the previous day
                context = context.model_copy(update={'current_date': None})
            elif line.startswith(TASK_MARKER):
                dropped = True
            elif current is not None:
                tasks.pop()
                current = None
                dropped = True

    LOG.debug('Parsed %d tasks', len(tasks))
    return tasks, context


def parse_document(
    document: Union[str, Iterable[str]],
    context: Optional[ParseContext] = None,
    on_error: str = 'raise',
) -> list[Task]:
    """Parse a task document and return its tasks in document order."""
    tasks, _ = scan_document(document, context, on_error)
    return tasks
