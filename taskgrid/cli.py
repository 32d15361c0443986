"""Command line entry point: render a task document as an HTML calendar."""

import argparse
import logging
import os
import sys
from datetime import datetime
from typing import Optional

import pydantic

from .config import DEFAULT_BUCKET_MINUTES, DEFAULT_DAYS, DEFAULT_FILE, CalendarConfig
from .document_utils import parse_document
from .errors import TaskGridError
from .render_utils import render_calendar

LOG = logging.getLogger(__name__)


def env_int(name: str, default: int) -> int:
    """Read an integer default from the environment, ignoring bad values."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        LOG.warning("Ignoring %s=%r, not an integer; using %d", name, value, default)
        return default


def build_parser() -> argparse.ArgumentParser:
    default_file = os.getenv("TASKGRID_FILE", DEFAULT_FILE)
    default_days = env_int("TASKGRID_DAYS", DEFAULT_DAYS)
    default_bucket_minutes = env_int("TASKGRID_BUCKET_MINUTES", DEFAULT_BUCKET_MINUTES)

    ap = argparse.ArgumentParser(
        description="Render a plain-text task list as an HTML calendar grid."
    )
    ap.add_argument("path", nargs="?", default=default_file,
                    help=f"Task document to read (default: env TASKGRID_FILE or {DEFAULT_FILE})")
    ap.add_argument("--start", default=None, help="First day to show, YYYY-MM-DD (default: today)")
    ap.add_argument("--days", type=int, default=default_days,
                    help=f"Number of days to show (default: {default_days})")
    ap.add_argument("--bucket-minutes", type=int, default=default_bucket_minutes,
                    help=f"Minutes per grid row (default: {default_bucket_minutes})")
    ap.add_argument("--stylesheet", default="stylesheet.css", help="Stylesheet href for the page")
    ap.add_argument("--out", default=None, help="Output HTML path (default: stdout)")
    ap.add_argument("--skip-invalid", action="store_true",
                    help="Skip tasks that fail to parse instead of aborting")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log ignored lines and grid details")
    return ap


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    settings = {
        'window_length_days': args.days,
        'bucket_minutes': args.bucket_minutes,
        'stylesheet': args.stylesheet,
    }
    if args.start:
        try:
            settings['window_start'] = datetime.strptime(args.start, "%Y-%m-%d").date()
        except ValueError as e:
            raise SystemExit(f"Invalid --start value: {e}")

    try:
        config = CalendarConfig(**settings)
    except pydantic.ValidationError as e:
        raise SystemExit(f"Invalid options: {e}")

    try:
        with open(args.path, encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise SystemExit(f"Error opening {args.path}: {e}")

    try:
        tasks = parse_document(text, on_error="skip" if args.skip_invalid else "raise")
    except TaskGridError as e:
        raise SystemExit(f"Error parsing {args.path}: {e}")

    html = render_calendar(tasks, config)

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(html)
        LOG.info("Wrote %s (%d tasks)", args.out, len(tasks))
    else:
        print(html)


if __name__ == "__main__":
    main()
