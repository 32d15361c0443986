"""Splitting a task line into tags, a time range and free-text details."""

from datetime import date, datetime, time, timedelta

from .errors import InvalidRange, MalformedAnnotation
from .grammar_utils import parse_duration, parse_time
from .models import Task


def parse_time_range(annotation: str) -> tuple[time, time]:
    """
    Parse the body of an '@' token.

    Two shapes are recognized:
    - Start+Duration, e.g. '9:00+1h30m'
    - Start--End, e.g. '9:00--17:00'

    Args:
        annotation: The token without its leading '@'

    Returns:
        (start, end) times of day
    """
    if '+' in annotation:
        parts = annotation.split('+')
        if len(parts) != 2:
            raise MalformedAnnotation(f"Not 2 parts to {annotation!r}", token=annotation)
        start = parse_time(parts[0])
        duration = parse_duration(parts[1])
        since_midnight = datetime.combine(date.min, start) - datetime.min
        if duration >= timedelta(days=1) - since_midnight:
            raise InvalidRange(
                f"Range {annotation!r} runs past midnight",
                token=annotation,
            )
        return start, (datetime.min + since_midnight + duration).time()

    if '--' in annotation:
        parts = annotation.split('--')
        if len(parts) != 2:
            raise MalformedAnnotation(f"Not 2 parts to {annotation!r}", token=annotation)
        start = parse_time(parts[0])
        end = parse_time(parts[1])
        if start > end:
            raise InvalidRange(
                f"Start time {parts[0]} interpreted as after end time {parts[1]}",
                token=annotation,
            )
        return start, end

    raise MalformedAnnotation(
        f"{annotation!r} is not of the form Start+Duration or Start--End",
        token=annotation,
    )


def annotate_task(line: str, task: Task) -> Task:
    """
    Apply one task line to a task being built.

    '+tag' tokens are appended to the tags, '@...' tokens set the time range
    and every other token is added to the details. Annotation tokens never
    end up in the details.

    Args:
        line: A bullet remainder or a continuation line
        task: The task to update in place

    Returns:
        The same task, for chaining
    """
    words = []
    for token in line.split():
        if token.startswith('+'):
            if len(token) == 1:
                raise MalformedAnnotation('Empty tag', token=token)
            task.tags.append(token[1:])
        elif token.startswith('@'):
            start, end = parse_time_range(token[1:])
            task.set_time_range(start, end)
        else:
            words.append(token)

    task.add_details(' '.join(words))
    return task
