"""Render a plain-text task list as a calendar grid."""

from .config import PUBLIC_TAGS, CalendarConfig
from .errors import (
    TaskGridError,
    MalformedHeader,
    UnparsableTime,
    UnparsableDuration,
    MalformedAnnotation,
    InvalidRange,
    MissingContext
)
from .models import Task, ParseContext
from .grammar_utils import (
    parse_date,
    parse_weekday,
    parse_time,
    parse_duration,
    resolve_weekday
)
from .annotation_utils import annotate_task, parse_time_range
from .document_utils import parse_document, scan_document
from .grid_utils import GridCell, MergedCell, ScheduleGrid, build_grid, merge_runs
from .render_utils import render_calendar, render_table, render_task_list

__all__ = [
    'PUBLIC_TAGS',
    'CalendarConfig',
    'TaskGridError',
    'MalformedHeader',
    'UnparsableTime',
    'UnparsableDuration',
    'MalformedAnnotation',
    'InvalidRange',
    'MissingContext',
    'Task',
    'ParseContext',
    'parse_date',
    'parse_weekday',
    'parse_time',
    'parse_duration',
    'resolve_weekday',
    'annotate_task',
    'parse_time_range',
    'parse_document',
    'scan_document',
    'GridCell',
    'MergedCell',
    'ScheduleGrid',
    'build_grid',
    'merge_runs',
    'render_calendar',
    'render_table',
    'render_task_list'
]
