# schedule_service/services/session_generation/rule_matcher.py
from datetime import date

from schedule_service.constants.sessions import WeekParity
from schedule_service.utils.calendar_utils import (
    is_last_week_of_month,
    iso_weekday,
    week_of_month_iso,
    weeks_between,
)


def matches_rule(day: date, schedule_start: date, rule) -> bool:
    """
    Decide whether `day` is an occurrence of `rule`.

    Checks, all of which must pass:
    1. weekday equals rule.day_of_week (ISO, Monday=1);
    2. whole weeks since the schedule start, minus start_offset_weeks, is >= 0;
    3. that adjusted week count is a multiple of interval_weeks (min 1);
    4. week_parity: cycle number (adjusted weeks // interval, 1-based) is odd/even;
    5. weeks_of_month, when non-empty, contains the ISO week-of-month of `day`;
    6. last_week_of_month: one week later falls in another month.

    weeks_of_month and last_week_of_month are ANDed when both are set.
    """
    if iso_weekday(day) != rule.day_of_week:
        return False

    adjusted = weeks_between(schedule_start, day) - (rule.start_offset_weeks or 0)
    if adjusted < 0:
        return False

    interval = rule.interval_weeks or 1
    if interval <= 0:
        interval = 1
    if adjusted % interval != 0:
        return False

    parity = (rule.week_parity or "").strip().lower()
    cycle = adjusted // interval + 1
    if parity == WeekParity.ODD and cycle % 2 != 1:
        return False
    if parity == WeekParity.EVEN and cycle % 2 != 0:
        return False

    weeks_of_month = rule.weeks_of_month or []
    if weeks_of_month and week_of_month_iso(day) not in {int(w) for w in weeks_of_month}:
        return False

    if rule.last_week_of_month and not is_last_week_of_month(day):
        return False

    return True
