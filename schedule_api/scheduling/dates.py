"""Candidate date values: ``YYYY-MM-DD HH:MM-HH:MM``."""

import re
from dataclasses import dataclass
from datetime import date, time, timedelta

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_RE = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d$")
DATE_VALUE_RE = re.compile(
    r"^(?P<day>\d{4}-\d{2}-\d{2}) (?P<start>(?:[01]\d|2[0-3]):[0-5]\d)-(?P<end>(?:[01]\d|2[0-3]):[0-5]\d)$"
)

MAX_BULK_DAYS = 31


@dataclass(frozen=True)
class DateValue:
    day: date
    start: time
    end: time

    def format(self) -> str:
        return format_date_value(self.day, self.start, self.end)


def parse_day(value: str) -> date:
    if not DATE_RE.match(value):
        raise ValueError(f"invalid date format: {value}")
    return date.fromisoformat(value)


def parse_time(value: str) -> time:
    if not TIME_RE.match(value):
        raise ValueError(f"invalid time format: {value}")
    return time.fromisoformat(value)


def parse_date_value(value: str) -> DateValue:
    """Parse a candidate date value, rejecting impossible days and empty ranges."""
    m = DATE_VALUE_RE.match(value.strip())
    if not m:
        raise ValueError(f"invalid date value: {value!r} (expected 'YYYY-MM-DD HH:MM-HH:MM')")
    day = parse_day(m.group("day"))
    start = parse_time(m.group("start"))
    end = parse_time(m.group("end"))
    if end <= start:
        raise ValueError(f"end time must be after start time: {value!r}")
    return DateValue(day=day, start=start, end=end)


def format_date_value(day: date, start: time, end: time) -> str:
    return f"{day.isoformat()} {start.strftime('%H:%M')}-{end.strftime('%H:%M')}"


def bulk_dates(start_day: date, days: int, start: time, end: time) -> list[str]:
    """Consecutive daily date values beginning at ``start_day``."""
    if not 1 <= days <= MAX_BULK_DAYS:
        raise ValueError(f"days must be between 1 and {MAX_BULK_DAYS}")
    if end <= start:
        raise ValueError("end time must be after start time")
    return [format_date_value(start_day + timedelta(days=i), start, end) for i in range(days)]


def time_options(step_minutes: int = 30) -> list[str]:
    """Times of day from 00:00 in ``step_minutes`` increments."""
    if step_minutes <= 0 or 1440 % step_minutes:
        raise ValueError("step_minutes must be a positive divisor of 1440")
    return [f"{m // 60:02d}:{m % 60:02d}" for m in range(0, 1440, step_minutes)]
