"""Data model for parsed tasks and the parser's date context."""

from datetime import date, time
from typing import Optional

import pydantic

from .errors import InvalidRange


class Task(pydantic.BaseModel):
    date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    details: str = ''
    tags: list[str] = pydantic.Field(default_factory=list)

    @pydantic.model_validator(mode='after')
    def validate_time_range(self) -> 'Task':
        check_time_range(self.start_time, self.end_time)
        return self

    @property
    def has_time_range(self) -> bool:
        return self.start_time is not None and self.end_time is not None

    @property
    def is_public(self) -> bool:
        return 'public' in self.tags

    def set_time_range(self, start: time, end: time) -> None:
        """Assign both ends of the time range at once, keeping the invariant."""
        check_time_range(start, end)
        self.start_time = start
        self.end_time = end

    def add_details(self, text: str) -> None:
        if not text:
            return
        self.details = f"{self.details} {text}" if self.details else text


def check_time_range(start: Optional[time], end: Optional[time]) -> None:
    if (start is None) != (end is None):
        raise InvalidRange('start_time and end_time must both be set or both be absent')
    if start is not None and start > end:
        raise InvalidRange(f"Start time {start:%H:%M} is after end time {end:%H:%M}")


class ParseContext(pydantic.BaseModel):
    """Date state carried from one line of a document to the next."""

    model_config = pydantic.ConfigDict(frozen=True)

    week_anchor: Optional[date] = None
    current_date: Optional[date] = None
