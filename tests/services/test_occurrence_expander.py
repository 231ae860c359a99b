from datetime import date, datetime, time, timedelta, timezone
from types import SimpleNamespace
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from schedule_service.services.session_generation.exceptions import ScheduleValidationError
from schedule_service.services.session_generation.occurrence_expander import (
    expand_occurrences,
    validate_date_range,
)

JAKARTA = timezone(timedelta(hours=7), "Asia/Jakarta")


def make_rule(rule_id="rul_1", day_of_week=1, start=time(7, 30), end=time(9, 0), csst_id=None):
    return SimpleNamespace(
        id=rule_id,
        schedule_id="sch_1",
        csst_id=csst_id,
        day_of_week=day_of_week,
        start_time=start,
        end_time=end,
        interval_weeks=1,
        start_offset_weeks=0,
        week_parity=None,
        weeks_of_month=None,
        last_week_of_month=False,
    )


def test_weekly_rule_converted_to_utc():
    occurrences = expand_occurrences(
        date(2025, 1, 6), date(2025, 1, 31), [make_rule(csst_id="csst_1")], JAKARTA, max_days=360
    )

    assert [o.date for o in occurrences] == [
        date(2025, 1, 6),
        date(2025, 1, 13),
        date(2025, 1, 20),
        date(2025, 1, 27),
    ]
    first = occurrences[0]
    assert first.rule_id == "rul_1"
    assert first.csst_id == "csst_1"
    assert first.starts_at == datetime(2025, 1, 6, 0, 30, tzinfo=timezone.utc)
    assert first.ends_at == datetime(2025, 1, 6, 2, 0, tzinfo=timezone.utc)


def test_end_before_start_rolls_to_next_day():
    rule = make_rule(start=time(22, 0), end=time(1, 0))
    occurrence = expand_occurrences(
        date(2025, 1, 6), date(2025, 1, 6), [rule], JAKARTA, max_days=360
    )[0]
    assert occurrence.ends_at - occurrence.starts_at == timedelta(hours=3)


def test_zero_duration_rolls_a_full_day():
    rule = make_rule(start=time(8, 0), end=time(8, 0))
    occurrence = expand_occurrences(
        date(2025, 1, 6), date(2025, 1, 6), [rule], JAKARTA, max_days=360
    )[0]
    assert occurrence.ends_at - occurrence.starts_at == timedelta(hours=24)


def test_overnight_roll_is_elapsed_time_across_dst_change():
    try:
        berlin = ZoneInfo("Europe/Berlin")
    except ZoneInfoNotFoundError:
        pytest.skip("tz database not available")
    # Clocks move forward in the night of 2025-03-29 to 2025-03-30.
    rule = make_rule(day_of_week=6, start=time(22, 0), end=time(22, 0))
    occurrence = expand_occurrences(
        date(2025, 3, 29), date(2025, 3, 29), [rule], berlin, max_days=360
    )[0]
    assert occurrence.starts_at == datetime(2025, 3, 29, 21, 0, tzinfo=timezone.utc)
    assert occurrence.ends_at - occurrence.starts_at == timedelta(hours=24)


def test_occurrences_carry_rule_snapshot():
    occurrences = expand_occurrences(
        date(2025, 1, 6), date(2025, 1, 13), [make_rule()], JAKARTA, max_days=360
    )
    assert occurrences[0].rule is occurrences[1].rule
    assert occurrences[0].rule.as_dict()["start_time"] == "07:30:00"
    assert occurrences[0].rule.schedule_id == "sch_1"


def test_no_rules_yields_single_untimed_occurrence():
    occurrences = expand_occurrences(date(2025, 1, 6), date(2025, 1, 31), [], JAKARTA, max_days=360)
    assert len(occurrences) == 1
    assert occurrences[0].date == date(2025, 1, 6)
    assert occurrences[0].rule_id is None
    assert occurrences[0].starts_at is None
    assert occurrences[0].ends_at is None


def test_rules_on_same_day_keep_load_order():
    rules = [make_rule("rul_a", start=time(7, 0)), make_rule("rul_b", start=time(9, 0), end=time(10, 0))]
    occurrences = expand_occurrences(date(2025, 1, 6), date(2025, 1, 6), rules, JAKARTA, max_days=360)
    assert [o.rule_id for o in occurrences] == ["rul_a", "rul_b"]


def test_rule_with_unparseable_time_is_skipped():
    rules = [make_rule("rul_bad", start="not-a-time"), make_rule("rul_ok", day_of_week=3)]
    occurrences = expand_occurrences(date(2025, 1, 6), date(2025, 1, 12), rules, JAKARTA, max_days=360)
    assert [o.rule_id for o in occurrences] == ["rul_ok"]


def test_validate_date_range_rejects_reversed_range():
    with pytest.raises(ScheduleValidationError):
        validate_date_range(date(2025, 2, 1), date(2025, 1, 1), 360)


def test_validate_date_range_limit_is_inclusive():
    assert validate_date_range(date(2025, 1, 1), date(2025, 12, 26), 360) == 360
    with pytest.raises(ScheduleValidationError):
        validate_date_range(date(2025, 1, 1), date(2025, 12, 27), 360)


def test_cancel_check_runs_per_date():
    calls = []

    def check():
        calls.append(1)
        if len(calls) > 3:
            raise RuntimeError("stop")

    with pytest.raises(RuntimeError):
        expand_occurrences(
            date(2025, 1, 6), date(2025, 1, 31), [make_rule()], JAKARTA,
            max_days=360, check_cancelled=check,
        )
    assert len(calls) == 4
