#!/usr/bin/env python3
"""
Simple example demonstrating the task calendar.
Parses a small week of tasks and prints the grid and the rendered page.
"""

from datetime import date
import sys
import os

# Add parent directory to path so we can import taskgrid
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from taskgrid import CalendarConfig, build_grid, merge_runs, parse_document, render_calendar


DOCUMENT = """\
# Week of 01/03/22
## Monday
- [ ] Team sync @9:00--9:30 +busy
- [ ] Write report @9:00+2h +self
  +public more notes on the report
## Wednesday
- [ ] Hike with friends @1--5 +rough +join-me +public
- [ ] Pick up groceries
"""


def main():
    tasks = parse_document(DOCUMENT)

    for i, task in enumerate(tasks):
        if task.has_time_range:
            span = f"{task.start_time:%H:%M}-{task.end_time:%H:%M}"
        else:
            span = "untimed"
        print(f"task-{i} | {task.date:%a %m/%d} | {span:11} | {', '.join(task.tags):20} | {task.details}")

    # Show the week of 01/03/22 in half-hour rows
    config = CalendarConfig(window_start=date(2022, 1, 3), window_length_days=7, bucket_minutes=30)
    grid = build_grid(tasks, config.window_start, config.window_length_days, config.bucket_size)

    print()
    for column in merge_runs(grid):
        for run in column:
            start = grid.bucket_start(run.start_bucket)
            print(f"{grid.days[run.day]:%a} {start:%H:%M} x{run.span:<3} task-{run.winner} {list(run.tags)}")

    print()
    print(render_calendar(tasks, config))


if __name__ == '__main__':
    main()
