"""HTML rendering of a schedule grid and its task list."""

from datetime import date, time
from html import escape
from typing import Mapping, Optional

from .config import CalendarConfig
from .grid_utils import MergedCell, ScheduleGrid, build_grid, merge_runs
from .models import Task


PAGE_TEMPLATE = (
    '<html><head><meta charset="UTF-8"><title>{title}</title>'
    '<link rel="stylesheet" href="{stylesheet}"></link></head>'
    '<body>{body}</body></html>'
)


def format_day(d: date) -> str:
    """'Mon 1/3/22'"""
    return f"{d:%a} {d.month}/{d.day}/{d:%y}"


def format_clock(t: time, separator: str = '') -> str:
    """'9:00AM', or '9:00 AM' with a space separator."""
    hour = t.hour % 12 or 12
    meridiem = 'AM' if t.hour < 12 else 'PM'
    return f"{hour}:{t.minute:02d}{separator}{meridiem}"


def task_anchor(task_id: int) -> str:
    return f"task-{task_id}"


def render_cell(run: MergedCell) -> str:
    classes = ' '.join(['has-task'] + [f"tag-{escape(tag)}" for tag in run.tags])
    label = escape(', '.join(run.tags)) if run.tags else 'has-task'
    return (
        f'<td class="{classes}" rowspan="{run.span}">'
        f'<a href="#{task_anchor(run.winner)}">{label}</a></td>'
    )


def render_table(grid: ScheduleGrid) -> str:
    """
    Render the grid as a table with one row per bucket.

    A merged run is emitted once, on its first row, with a rowspan covering
    the rest of the run. Rows below it leave that column out.
    """
    run_starts = {
        (run.start_bucket, run.day): run
        for column in merge_runs(grid)
        for run in column
    }

    parts = ['<table><tr><th>Time</th>']
    for day in grid.days:
        parts.append(f'<th>{format_day(day)}</th>')
    parts.append('</tr>')

    for bucket in range(grid.buckets_per_day):
        parts.append(f'<tr><td><b>{format_clock(grid.bucket_start(bucket), " ")}</b></td>')
        for day in range(len(grid.days)):
            run = run_starts.get((bucket, day))
            if run is not None:
                parts.append(render_cell(run))
            elif grid.winner_at(bucket, day) is None:
                parts.append('<td></td>')
        parts.append('</tr>')

    parts.append('</table>')
    return ''.join(parts)


def render_task_list(tasks: list[Task], grid: ScheduleGrid, public_tags: Mapping[str, str]) -> str:
    """
    Render one list entry per task in the window.

    Details are shown only for tasks tagged 'public'; each allow-listed tag
    gets a line explaining what it means.
    """
    parts = ['<ul>']
    for task_id in grid.task_ids:
        task = tasks[task_id]
        parts.append(f'<li id="{task_anchor(task_id)}">{format_day(task.date)} ')
        if task.has_time_range:
            parts.append(f'{format_clock(task.start_time)} -- {format_clock(task.end_time)}')

        parts.append('<ul>')
        if task.is_public:
            parts.append(f'<li><b>Description:</b> {escape(task.details)}</li>')
        for tag in task.tags:
            if tag in public_tags:
                parts.append(f'<li>Tagged <b>{escape(tag)}:</b> {escape(public_tags[tag])}</li>')
        parts.append('</ul></li>')

    parts.append('</ul>')
    return ''.join(parts)


def render_calendar(tasks: list[Task], config: Optional[CalendarConfig] = None) -> str:
    """
    Render the full calendar page for a list of parsed tasks.

    Args:
        tasks: Tasks in document order
        config: Window, bucket size and tag table (defaults: today, 14 days, 15 minutes)

    Returns:
        An HTML document
    """
    config = config or CalendarConfig()
    grid = build_grid(
        tasks,
        config.window_start,
        config.window_length_days,
        config.bucket_size,
        config.public_tags.keys(),
    )
    body = render_table(grid) + render_task_list(tasks, grid, config.public_tags)
    return PAGE_TEMPLATE.format(
        title=escape(config.title),
        stylesheet=escape(config.stylesheet),
        body=body,
    )
