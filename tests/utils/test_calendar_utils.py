from datetime import date, datetime, time, timedelta, timezone

import pytest

from schedule_service.utils.calendar_utils import (
    combine_local,
    inclusive_day_span,
    is_last_week_of_month,
    iso_weekday,
    iter_days,
    load_timezone,
    parse_time_of_day,
    to_utc,
    week_of_month_iso,
    weeks_between,
)
from schedule_service.utils.slug import meeting_slug, section_room_slug


def test_iso_weekday_monday_is_one():
    assert iso_weekday(date(2025, 1, 6)) == 1
    assert iso_weekday(date(2025, 1, 12)) == 7


def test_week_of_month_counts_from_monday_before_first():
    # January 2025 starts on a Wednesday: Mon 2024-12-30 opens week 1.
    assert week_of_month_iso(date(2025, 1, 1)) == 1
    assert week_of_month_iso(date(2025, 1, 5)) == 1
    assert week_of_month_iso(date(2025, 1, 6)) == 2
    assert week_of_month_iso(date(2025, 1, 27)) == 5


def test_week_of_month_when_month_starts_on_monday():
    # September 2025 starts on a Monday.
    assert week_of_month_iso(date(2025, 9, 1)) == 1
    assert week_of_month_iso(date(2025, 9, 8)) == 2


def test_last_week_of_month():
    assert is_last_week_of_month(date(2025, 1, 27))
    assert not is_last_week_of_month(date(2025, 1, 20))
    assert is_last_week_of_month(date(2025, 2, 24))


def test_weeks_between_truncates_toward_zero():
    base = date(2025, 1, 6)
    assert weeks_between(base, date(2025, 1, 6)) == 0
    assert weeks_between(base, date(2025, 1, 12)) == 0
    assert weeks_between(base, date(2025, 1, 13)) == 1
    assert weeks_between(base, date(2025, 1, 1)) == 0
    assert weeks_between(base, date(2024, 12, 30)) == -1


def test_iter_days_and_span_are_inclusive():
    days = list(iter_days(date(2025, 1, 30), date(2025, 2, 2)))
    assert days == [date(2025, 1, 30), date(2025, 1, 31), date(2025, 2, 1), date(2025, 2, 2)]
    assert inclusive_day_span(date(2025, 1, 1), date(2025, 1, 1)) == 1
    assert inclusive_day_span(date(2025, 1, 1), date(2025, 12, 26)) == 360


def test_load_timezone_defaults_to_jakarta_offset():
    tz = load_timezone(None)
    assert tz.utcoffset(datetime(2025, 1, 6, 12, 0)) == timedelta(hours=7)


def test_load_timezone_unknown_name_falls_back_to_fixed_offset():
    tz = load_timezone("Mars/Olympus_Mons")
    assert tz.utcoffset(None) == timedelta(hours=7)


def test_parse_time_of_day():
    assert parse_time_of_day(time(7, 30)) == time(7, 30)
    assert parse_time_of_day("07:30") == time(7, 30)
    assert parse_time_of_day("23:15:05") == time(23, 15, 5)
    with pytest.raises(ValueError):
        parse_time_of_day("half past seven")
    with pytest.raises(ValueError):
        parse_time_of_day(None)


def test_combine_local_then_to_utc():
    tz = timezone(timedelta(hours=7))
    local = combine_local(date(2025, 1, 6), time(7, 30), tz)
    assert to_utc(local) == datetime(2025, 1, 6, 0, 30, tzinfo=timezone.utc)


def test_section_room_slug_strips_separators():
    assert section_room_slug("sec_9F2A-01") == "section-sec9f2a01"
    assert section_room_slug("3f0c1b2a-aaaa-bbbb") == "section-3f0c1b2aaaaabbbb"


def test_meeting_slug():
    assert meeting_slug("math-x-ipa-1", 3) == "math-x-ipa-1-pertemuan-3"
