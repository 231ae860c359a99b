"""
Calendar utilities for recurring class schedules.

Small, pure helpers for the date arithmetic the rule matcher depends on:
ISO weekdays, week-of-month numbering, whole weeks between two dates and
combining a local calendar date with a time of day in a school's timezone.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterator
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from schedule_service.core.config import settings

logger = logging.getLogger(__name__)


def iso_weekday(day: date) -> int:
    """Monday=1 .. Sunday=7."""
    return day.isoweekday()


def week_of_month_iso(day: date) -> int:
    """
    Week number of `day` inside its month, 1-based.

    Week 1 starts on the Monday on or before the 1st of the month, so the
    first days of a month that starts mid-week belong to week 1 together with
    the tail of the previous month's last week.
    """
    first = day.replace(day=1)
    first_week_start = first - timedelta(days=first.isoweekday() - 1)
    return (day - first_week_start).days // 7 + 1


def is_last_week_of_month(day: date) -> bool:
    """True when the same weekday one week later falls in another month."""
    return (day + timedelta(days=7)).month != day.month


def weeks_between(base: date, target: date) -> int:
    """
    Whole weeks from `base` to `target`, truncated toward zero.

    Negative when `target` is before `base`.
    """
    days = (target - base).days
    if days < 0:
        return -((-days) // 7)
    return days // 7


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar date from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def inclusive_day_span(start: date, end: date) -> int:
    return (end - start).days + 1


def load_timezone(name: str | None) -> tzinfo:
    """
    Resolve an IANA timezone name.

    Blank names use the configured default. When the timezone database does
    not know the name, fall back to a fixed offset zone for the default
    timezone (UTC+7 for Asia/Jakarta).
    """
    tz_name = (name or "").strip() or settings.DEFAULT_TIMEZONE
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(
            f"Unknown timezone '{tz_name}', falling back to fixed "
            f"UTC+{settings.DEFAULT_TIMEZONE_OFFSET_HOURS} ({settings.DEFAULT_TIMEZONE})"
        )
        return timezone(
            timedelta(hours=settings.DEFAULT_TIMEZONE_OFFSET_HOURS),
            settings.DEFAULT_TIMEZONE,
        )


def parse_time_of_day(value) -> time:
    """
    Accept a `datetime.time` or an "HH:MM" / "HH:MM:SS" string.

    Raises ValueError for anything else.
    """
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        for fmt in ("%H:%M:%S", "%H:%M"):
            try:
                return datetime.strptime(value.strip(), fmt).time()
            except ValueError:
                continue
    raise ValueError(f"Invalid time-of-day: {value!r}")


def combine_local(day: date, time_of_day: time, tz: tzinfo) -> datetime:
    """Timezone-aware local datetime for a calendar date and a time of day."""
    return datetime(
        day.year,
        day.month,
        day.day,
        time_of_day.hour,
        time_of_day.minute,
        time_of_day.second,
        tzinfo=tz,
    )


def to_utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc)
