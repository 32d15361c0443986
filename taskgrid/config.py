"""Rendering configuration and the public tag table."""

from datetime import date, timedelta
from types import MappingProxyType
from typing import Mapping

import pydantic


PUBLIC_TAGS: Mapping[str, str] = MappingProxyType({
    'busy': "I will be genuinely busy, e.g., a meeting with others.",
    'rough': "The nature of the event (e.g., a hike) makes it difficult to predict the exact start/end times.",
    'tentative': "This event timing is only tentative.",
    'join-me': "This is an open event; if you're interested in attending with me please reach out!",
    'self': "This is scheduled time for me to complete a specific work or personal task; I can usually reschedule such blocks when requested.",
})

DEFAULT_FILE = 'wtd.md'
DEFAULT_DAYS = 14
DEFAULT_BUCKET_MINUTES = 15

MINUTES_PER_DAY = 24 * 60


class CalendarConfig(pydantic.BaseModel):
    window_start: date = pydantic.Field(default_factory=date.today)
    window_length_days: int = 14
    bucket_minutes: int = 15
    public_tags: Mapping[str, str] = pydantic.Field(default_factory=lambda: PUBLIC_TAGS)
    title: str = 'Calendar'
    stylesheet: str = 'stylesheet.css'

    @pydantic.field_validator('window_length_days')
    @classmethod
    def validate_window_length(cls, v: int) -> int:
        if v <= 0:
            raise ValueError('window_length_days must be greater than 0')
        return v

    @pydantic.field_validator('bucket_minutes')
    @classmethod
    def validate_bucket_minutes(cls, v: int) -> int:
        if v <= 0 or MINUTES_PER_DAY % v != 0:
            raise ValueError('bucket_minutes must evenly divide a day (1440 minutes)')
        return v

    @pydantic.field_validator('public_tags')
    @classmethod
    def freeze_public_tags(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(v))

    @property
    def bucket_size(self) -> timedelta:
        return timedelta(minutes=self.bucket_minutes)
