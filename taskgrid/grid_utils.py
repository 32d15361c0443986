"""Placing tasks with overlapping time ranges onto a day x time-bucket grid."""

import logging
from collections import defaultdict
from datetime import date, time, timedelta
from typing import Collection, Optional

import pydantic

from .config import PUBLIC_TAGS
from .models import Task

LOG = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class GridCell(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True)

    winner: Optional[int] = None
    tags: tuple[str, ...] = ()


class MergedCell(pydantic.BaseModel):
    """A run of contiguous buckets in one day column sharing the same winner."""

    model_config = pydantic.ConfigDict(frozen=True)

    day: int
    start_bucket: int
    span: int
    winner: int
    tags: tuple[str, ...] = ()


class ScheduleGrid(pydantic.BaseModel):
    window_start: date
    days: list[date]
    bucket_size: timedelta
    task_ids: list[int]
    cells: list[list[GridCell]]  # cells[bucket][day]

    @property
    def buckets_per_day(self) -> int:
        return len(self.cells)

    def bucket_start(self, bucket: int) -> time:
        seconds = int(self.bucket_size.total_seconds()) * bucket
        return time(seconds // 3600, seconds // 60 % 60, seconds % 60)

    def winner_at(self, bucket: int, day: int) -> Optional[int]:
        return self.cells[bucket][day].winner


def _seconds(t: time) -> int:
    return t.hour * 3600 + t.minute * 60 + t.second


def sort_key(task_id: int, task: Task) -> tuple:
    """Date first, then start time with untimed tasks last, then list order."""
    return (
        task.date,
        task.start_time is None,
        task.start_time or time.min,
        task_id,
    )


def select_window_tasks(tasks: list[Task], window_start: date, window_length_days: int) -> list[int]:
    """
    Pick the tasks dated inside [window_start, window_start + N days).

    Returns:
        Indices into tasks, sorted by date and start time
    """
    window_end = window_start + timedelta(days=window_length_days)
    selected = [
        i for i, task in enumerate(tasks)
        if window_start <= task.date < window_end
    ]
    return sorted(selected, key=lambda i: sort_key(i, tasks[i]))


def find_intersecting(tasks: list[Task], task_ids: list[int], bucket_start: int, bucket_end: int) -> list[int]:
    """
    Return the timed tasks whose [start, end) overlaps [bucket_start, bucket_end).

    Bounds are seconds since midnight. Both intervals are half-open, so a task
    ending exactly at bucket_start does not overlap.
    """
    return [
        i for i in task_ids
        if tasks[i].has_time_range
        and _seconds(tasks[i].start_time) < bucket_end
        and bucket_start < _seconds(tasks[i].end_time)
    ]


def pick_winner(tasks: list[Task], intersecting: list[int]) -> Optional[int]:
    """The task ending first wins, then the one starting first, then list order."""
    if not intersecting:
        return None
    return min(intersecting, key=lambda i: (tasks[i].end_time, tasks[i].start_time, i))


def visible_tags(tasks: list[Task], intersecting: list[int], allowed: Collection[str]) -> tuple[str, ...]:
    tags = {tag for i in intersecting for tag in tasks[i].tags if tag in allowed}
    return tuple(sorted(tags))


def build_grid(
    tasks: list[Task],
    window_start: date,
    window_length_days: int = 14,
    bucket_size: timedelta = timedelta(minutes=15),
    allowed_tags: Collection[str] = PUBLIC_TAGS.keys(),
) -> ScheduleGrid:
    """
    Build the day x bucket grid for a window of days.

    Algorithm:
    1. Select tasks dated inside the window and sort them
    2. For each (bucket, day) find the timed tasks overlapping the bucket
    3. The overlapping task with the earliest end wins the cell
    4. The cell shows the allowed tags of every overlapping task

    Args:
        tasks: All parsed tasks; a task's index is its identifier
        window_start: First day of the grid
        window_length_days: Number of day columns
        bucket_size: Height of one row, must divide a day evenly
        allowed_tags: Tags surfaced on the grid

    Returns:
        The populated grid
    """
    bucket_seconds = int(bucket_size.total_seconds())
    if bucket_seconds <= 0 or bucket_size != timedelta(seconds=bucket_seconds) \
            or SECONDS_PER_DAY % bucket_seconds != 0:
        raise ValueError(f"bucket_size must evenly divide a day, got {bucket_size}")
    if window_length_days <= 0:
        raise ValueError('window_length_days must be greater than 0')

    # Step 1: Select and order the tasks in the window
    task_ids = select_window_tasks(tasks, window_start, window_length_days)
    days = [window_start + timedelta(days=offset) for offset in range(window_length_days)]

    by_day = defaultdict(list)
    for i in task_ids:
        by_day[tasks[i].date].append(i)

    # Steps 2-4: Resolve every cell
    cells = []
    for bucket in range(SECONDS_PER_DAY // bucket_seconds):
        bucket_start = bucket * bucket_seconds
        bucket_end = bucket_start + bucket_seconds
        row = []
        for day in days:
            intersecting = find_intersecting(tasks, by_day[day], bucket_start, bucket_end)
            row.append(GridCell(
                winner=pick_winner(tasks, intersecting),
                tags=visible_tags(tasks, intersecting, allowed_tags),
            ))
        cells.append(row)

    LOG.debug('Built grid of %d buckets x %d days with %d tasks',
              len(cells), len(days), len(task_ids))

    return ScheduleGrid(
        window_start=window_start,
        days=days,
        bucket_size=bucket_size,
        task_ids=task_ids,
        cells=cells,
    )


def merge_runs(grid: ScheduleGrid) -> list[list[MergedCell]]:
    """
    Merge contiguous buckets with the same winner, column by column.

    A run only covers the buckets immediately following its first one; a
    winner that reappears after a gap starts a new run.

    Returns:
        One list of runs per day column, top to bottom
    """
    columns = []
    for day in range(len(grid.days)):
        runs = []
        bucket = 0
        while bucket < grid.buckets_per_day:
            winner = grid.winner_at(bucket, day)
            if winner is None:
                bucket += 1
                continue

            span = 1
            while bucket + span < grid.buckets_per_day \
                    and grid.winner_at(bucket + span, day) == winner:
                span += 1

            runs.append(MergedCell(
                day=day,
                start_bucket=bucket,
                span=span,
                winner=winner,
                tags=grid.cells[bucket][day].tags,
            ))
            bucket += span
        columns.append(runs)

    return columns
