"""
Tests for the scheduling grid.

- Window selection and ordering
- Overlap detection on half-open buckets
- Winner selection and tie-breaking
- Tag aggregation
- Contiguous-run merging
"""

import pytest
from datetime import date, time, timedelta
import sys
import os

# Add parent directory to path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from taskgrid import Task, build_grid, merge_runs, parse_document
from taskgrid.grid_utils import select_window_tasks

DAY = date(2022, 1, 3)


def make_task(start=None, end=None, tags=(), day=DAY, details=''):
    return Task(
        date=day,
        start_time=time(*start) if start else None,
        end_time=time(*end) if end else None,
        tags=list(tags),
        details=details,
    )


def bucket(hour, minute=0, size=15):
    return (hour * 60 + minute) // size


class TestWindowSelection:
    """Test picking and ordering the tasks of a window."""

    def test_only_window_days(self):
        """Test that the window is [start, start + N days)."""
        tasks = [
            make_task(day=DAY - timedelta(days=1)),
            make_task(day=DAY),
            make_task(day=DAY + timedelta(days=6)),
            make_task(day=DAY + timedelta(days=7)),
        ]
        assert select_window_tasks(tasks, DAY, 7) == [1, 2]

    def test_sorted_by_date_then_start(self):
        """Test ordering by date, then start time, untimed tasks last."""
        tasks = [
            make_task(day=DAY + timedelta(days=1), start=(8, 0), end=(9, 0)),
            make_task(),
            make_task(start=(14, 0), end=(15, 0)),
            make_task(start=(9, 0), end=(10, 0)),
        ]
        assert select_window_tasks(tasks, DAY, 2) == [3, 2, 1, 0]

    def test_grid_keeps_window_order(self):
        tasks = [make_task(start=(14, 0), end=(15, 0)), make_task(start=(9, 0), end=(10, 0))]
        grid = build_grid(tasks, DAY, 1)
        assert grid.task_ids == [1, 0]


class TestGridShape:
    """Test grid dimensions and validation."""

    def test_default_shape(self):
        grid = build_grid([], DAY)
        assert grid.buckets_per_day == 96
        assert len(grid.days) == 14
        assert grid.days[0] == DAY
        assert grid.days[-1] == DAY + timedelta(days=13)
        assert all(cell.winner is None for row in grid.cells for cell in row)

    def test_hourly_buckets(self):
        grid = build_grid([], DAY, 3, timedelta(hours=1))
        assert grid.buckets_per_day == 24
        assert len(grid.cells[0]) == 3

    def test_bucket_start(self):
        grid = build_grid([], DAY, 1)
        assert grid.bucket_start(0) == time(0, 0)
        assert grid.bucket_start(38) == time(9, 30)
        assert grid.bucket_start(95) == time(23, 45)

    def test_bucket_must_divide_day(self):
        with pytest.raises(ValueError):
            build_grid([], DAY, 1, timedelta(minutes=7))

    def test_bucket_must_be_positive(self):
        with pytest.raises(ValueError):
            build_grid([], DAY, 1, timedelta(0))

    def test_window_must_be_positive(self):
        with pytest.raises(ValueError):
            build_grid([], DAY, 0)


class TestOverlap:
    """Test which buckets a task occupies."""

    def test_half_open_intervals(self):
        """Test that a task touches neither the bucket before nor after it."""
        grid = build_grid([make_task(start=(9, 0), end=(9, 15))], DAY, 1)
        assert grid.winner_at(bucket(8, 45), 0) is None
        assert grid.winner_at(bucket(9, 0), 0) == 0
        assert grid.winner_at(bucket(9, 15), 0) is None

    def test_partial_bucket_overlap(self):
        """Test that a task partially covering a bucket still occupies it."""
        grid = build_grid([make_task(start=(9, 10), end=(9, 20))], DAY, 1)
        assert grid.winner_at(bucket(9, 0), 0) == 0
        assert grid.winner_at(bucket(9, 15), 0) == 0
        assert grid.winner_at(bucket(9, 30), 0) is None

    def test_task_inside_one_bucket(self):
        grid = build_grid([make_task(start=(9, 3), end=(9, 7))], DAY, 1)
        assert grid.winner_at(bucket(9, 0), 0) == 0
        assert grid.winner_at(bucket(9, 15), 0) is None

    def test_untimed_task_not_placed(self):
        grid = build_grid([make_task(tags=['busy'])], DAY, 1)
        assert grid.task_ids == [0]
        assert all(cell.winner is None for row in grid.cells for cell in row)

    def test_empty_range_not_placed(self):
        grid = build_grid([make_task(start=(9, 0), end=(9, 0))], DAY, 1)
        assert all(cell.winner is None for row in grid.cells for cell in row)

    def test_right_day_column(self):
        task = make_task(start=(9, 0), end=(10, 0), day=DAY + timedelta(days=2))
        grid = build_grid([task], DAY, 3)
        assert grid.winner_at(bucket(9, 0), 2) == 0
        assert grid.winner_at(bucket(9, 0), 0) is None
        assert grid.winner_at(bucket(9, 0), 1) is None

    def test_runs_until_end_of_day(self):
        grid = build_grid([make_task(start=(23, 0), end=(23, 59))], DAY, 1)
        assert grid.winner_at(95, 0) == 0


class TestWinner:
    """Test choosing one task per cell."""

    def test_earliest_end_wins(self):
        """Test A [9:00,10:00) against B [9:30,9:45)."""
        tasks = [make_task(start=(9, 0), end=(10, 0)), make_task(start=(9, 30), end=(9, 45))]
        grid = build_grid(tasks, DAY, 1)
        assert grid.winner_at(bucket(9, 0), 0) == 0
        assert grid.winner_at(bucket(9, 15), 0) == 0
        assert grid.winner_at(bucket(9, 30), 0) == 1
        assert grid.winner_at(bucket(9, 45), 0) == 0

    def test_tie_on_end_earliest_start_wins(self):
        tasks = [make_task(start=(9, 30), end=(10, 0)), make_task(start=(9, 0), end=(10, 0))]
        grid = build_grid(tasks, DAY, 1)
        assert grid.winner_at(bucket(9, 45), 0) == 1

    def test_full_tie_list_order_wins(self):
        tasks = [make_task(start=(9, 0), end=(10, 0)), make_task(start=(9, 0), end=(10, 0))]
        grid = build_grid(tasks, DAY, 1)
        assert grid.winner_at(bucket(9, 0), 0) == 0

    def test_winner_is_task_list_index(self):
        """Test that winners are indices into the full task list, not the window."""
        tasks = [
            make_task(start=(9, 0), end=(10, 0), day=DAY - timedelta(days=1)),
            make_task(start=(9, 0), end=(10, 0)),
        ]
        grid = build_grid(tasks, DAY, 1)
        assert grid.winner_at(bucket(9, 0), 0) == 1


class TestTags:
    """Test the tags shown in each cell."""

    def test_union_of_overlapping_tasks(self):
        """Test that tags come from every overlapping task, not just the winner."""
        tasks = [
            make_task(start=(9, 0), end=(10, 0), tags=['rough']),
            make_task(start=(9, 30), end=(9, 45), tags=['busy']),
        ]
        grid = build_grid(tasks, DAY, 1)
        cell = grid.cells[bucket(9, 30)][0]
        assert cell.winner == 1
        assert cell.tags == ('busy', 'rough')

    def test_only_allowed_tags(self):
        tasks = [make_task(start=(9, 0), end=(10, 0), tags=['public', 'tentative', 'errand'])]
        grid = build_grid(tasks, DAY, 1)
        assert grid.cells[bucket(9, 0)][0].tags == ('tentative',)

    def test_deduplicated_and_sorted(self):
        tasks = [
            make_task(start=(9, 0), end=(10, 0), tags=['self', 'busy', 'busy']),
            make_task(start=(9, 0), end=(9, 30), tags=['busy', 'join-me']),
        ]
        grid = build_grid(tasks, DAY, 1)
        assert grid.cells[bucket(9, 0)][0].tags == ('busy', 'join-me', 'self')

    def test_custom_allow_list(self):
        tasks = [make_task(start=(9, 0), end=(10, 0), tags=['focus', 'busy'])]
        grid = build_grid(tasks, DAY, 1, allowed_tags={'focus'})
        assert grid.cells[bucket(9, 0)][0].tags == ('focus',)

    def test_empty_cell_has_no_tags(self):
        grid = build_grid([make_task(start=(9, 0), end=(10, 0), tags=['busy'])], DAY, 1)
        assert grid.cells[bucket(11, 0)][0].tags == ()


class TestMergeRuns:
    """Test merging contiguous buckets into visual cells."""

    def test_three_buckets_one_run(self):
        grid = build_grid([make_task(start=(9, 0), end=(9, 45), tags=['busy'])], DAY, 1)
        runs = merge_runs(grid)

        assert len(runs) == 1
        assert len(runs[0]) == 1
        run = runs[0][0]
        assert run.start_bucket == bucket(9, 0)
        assert run.span == 3
        assert run.winner == 0
        assert run.tags == ('busy',)

    def test_reappearing_winner_splits(self):
        """Test that a winner interrupted by another task gives two separate runs."""
        tasks = [make_task(start=(9, 0), end=(10, 0)), make_task(start=(9, 15), end=(9, 30))]
        grid = build_grid(tasks, DAY, 1)
        runs = [(r.start_bucket, r.span, r.winner) for r in merge_runs(grid)[0]]

        assert runs == [
            (bucket(9, 0), 1, 0),
            (bucket(9, 15), 1, 1),
            (bucket(9, 30), 2, 0),
        ]

    def test_same_task_twice_in_column(self):
        """Test that two separate runs of equal shape are not counted together."""
        tasks = [
            make_task(start=(8, 0), end=(12, 0)),
            make_task(start=(9, 0), end=(11, 0)),
            make_task(start=(10, 0), end=(10, 30)),
        ]
        grid = build_grid(tasks, DAY, 1, timedelta(minutes=30))
        runs = [(r.start_bucket, r.span, r.winner) for r in merge_runs(grid)[0]]

        assert runs == [
            (bucket(8, 0, 30), 2, 0),
            (bucket(9, 0, 30), 2, 1),
            (bucket(10, 0, 30), 1, 2),
            (bucket(10, 30, 30), 1, 1),
            (bucket(11, 0, 30), 2, 0),
        ]

    def test_back_to_back_tasks(self):
        """Test that adjacent tasks with no gap are still separate runs."""
        tasks = [make_task(start=(9, 0), end=(9, 30)), make_task(start=(9, 30), end=(10, 0))]
        grid = build_grid(tasks, DAY, 1)
        runs = [(r.start_bucket, r.span, r.winner) for r in merge_runs(grid)[0]]
        assert runs == [(bucket(9, 0), 2, 0), (bucket(9, 30), 2, 1)]

    def test_columns_independent(self):
        tasks = [
            make_task(start=(9, 0), end=(10, 0)),
            make_task(start=(9, 0), end=(9, 30), day=DAY + timedelta(days=1)),
        ]
        runs = merge_runs(build_grid(tasks, DAY, 2))
        assert [(r.day, r.span, r.winner) for r in runs[0]] == [(0, 4, 0)]
        assert [(r.day, r.span, r.winner) for r in runs[1]] == [(1, 2, 1)]

    def test_run_at_end_of_day(self):
        grid = build_grid([make_task(start=(23, 15), end=(23, 59))], DAY, 1)
        runs = merge_runs(grid)[0]
        assert [(r.start_bucket, r.span) for r in runs] == [(93, 3)]

    def test_empty_column(self):
        assert merge_runs(build_grid([], DAY, 2)) == [[], []]


class TestFromDocument:
    """Test the grid built from a parsed document."""

    def test_parsed_tasks(self):
        tasks = parse_document(
            '# 01/03/22\n## Monday\n'
            '- [ ] Team sync @9:00--9:30 +busy\n'
            '- [ ] Focus time @9:00+2h +self\n'
        )
        grid = build_grid(tasks, DAY, 7)
        runs = [(r.start_bucket, r.span, r.winner, r.tags) for r in merge_runs(grid)[0]]

        assert runs == [
            (bucket(9, 0), 2, 0, ('busy', 'self')),
            (bucket(9, 30), 6, 1, ('self',)),
        ]
