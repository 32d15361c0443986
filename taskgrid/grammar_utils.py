"""Mini-grammars for the date, weekday, time and duration tokens of a task document."""

import re
from datetime import date, datetime, time, timedelta
from typing import Optional

from .errors import MalformedHeader, UnparsableDuration, UnparsableTime


WEEKDAY_OFFSET = 3  # after '## '
WEEKDAY_NAMES = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday')

TIME_FORMATS = ('%I:%M%p', '%H:%M')
AFTERNOON_CUTOFF_HOUR = 6

_DURATION_RE = re.compile(r"(?:([0-9]+)h(?:([0-9]+)m)?|([0-9]+)m)")


def parse_date(line: str) -> Optional[date]:
    """
    Find the first MM/DD/YY token in a line.

    Args:
        line: Any line of text, typically a '# ' section header

    Returns:
        The parsed date, or None when no token matches
    """
    for token in line.split():
        try:
            return datetime.strptime(token, '%m/%d/%y').date()
        except ValueError:
            continue
    return None


def parse_weekday(line: str) -> int:
    """
    Parse the weekday name of a '## ' day header.

    Full names and three-letter abbreviations are accepted in any case.

    Returns:
        Weekday number, Monday being 0 (same as date.weekday())
    """
    if len(line) < WEEKDAY_OFFSET:
        raise MalformedHeader(f"Day-of-week line not long enough: {line!r}", token=line)

    name = line[WEEKDAY_OFFSET:].strip().lower()
    for number, full_name in enumerate(WEEKDAY_NAMES):
        if name == full_name or name == full_name[:3]:
            return number

    raise MalformedHeader(f"Not a day of the week: {name!r}", token=name)


def resolve_weekday(anchor: date, weekday: int) -> date:
    """Return the first date on or after anchor falling on weekday."""
    current = anchor
    for _ in range(7):
        if current.weekday() == weekday:
            return current
        current += timedelta(days=1)

    raise MalformedHeader(f"No day with weekday {weekday} within a week of {anchor:%m/%d/%y}")


def normalize_time(token: str) -> str:
    """Insert the ':00' minutes of a bare hour such as '9' or '3pm'."""
    if ':' in token:
        return token
    if token[-2:].upper() in ('AM', 'PM'):
        return f"{token[:-2]}:00{token[-2:]}"
    return f"{token}:00"


def parse_time(token: str) -> time:
    """
    Parse a time-of-day token.

    12-hour times need a meridiem suffix. A 24-hour time before 6:00 is read
    as afternoon, so '3:00' is 15:00.

    Raises:
        UnparsableTime: if the token matches neither format
    """
    normalized = normalize_time(token)

    for fmt in TIME_FORMATS:
        try:
            parsed = datetime.strptime(normalized, fmt).time()
        except ValueError:
            continue
        if '%p' not in fmt and parsed.hour < AFTERNOON_CUTOFF_HOUR:
            parsed = parsed.replace(hour=parsed.hour + 12)
        return parsed

    raise UnparsableTime(f"Couldn't parse time {token!r}", token=token)


def parse_duration(token: str) -> timedelta:
    """
    Parse 'XhYm', 'Xh' or 'Ym' into a timedelta.

    Raises:
        UnparsableDuration: for any other shape
    """
    match = _DURATION_RE.fullmatch(token)
    if not match:
        raise UnparsableDuration(f"Couldn't parse duration {token!r}", token=token)

    hours, minutes, minutes_only = match.groups()
    try:
        return timedelta(hours=int(hours or 0), minutes=int(minutes or minutes_only or 0))
    except (OverflowError, ValueError):
        raise UnparsableDuration(f"Duration {token!r} is out of range", token=token)
