"""Error types raised while parsing a task document."""

from typing import Optional


class TaskGridError(ValueError):
    """Base class for every parse error.

    The parser fills in ``line_number`` and ``line`` before re-raising, so a
    message always points back at the offending input when it came from a
    document.
    """

    def __init__(self, message: str, token: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.token = token
        self.line_number: Optional[int] = None
        self.line: Optional[str] = None

    def at_line(self, line_number: int, line: str) -> 'TaskGridError':
        self.line_number = line_number
        self.line = line
        return self

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"line {self.line_number}: {self.message} ({self.line!r})"


class MalformedHeader(TaskGridError):
    """Bad or missing date / weekday in a header line."""


class UnparsableTime(TaskGridError):
    """A time token matching neither the 12-hour nor the 24-hour format."""


class UnparsableDuration(TaskGridError):
    """A duration token not of the form XhYm, Xh or Ym."""


class MalformedAnnotation(TaskGridError):
    """An annotation token matching neither recognized sub-grammar."""


class InvalidRange(TaskGridError):
    """End time before start time."""


class MissingContext(TaskGridError):
    """A task or continuation line seen before its date or task exists."""
