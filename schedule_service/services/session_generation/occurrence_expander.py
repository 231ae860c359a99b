# schedule_service/services/session_generation/occurrence_expander.py
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from schedule_service.schemas.generation import RuleSnapshot
from schedule_service.utils.calendar_utils import (
    combine_local,
    inclusive_day_span,
    iter_days,
    parse_time_of_day,
    to_utc,
)
from .exceptions import ScheduleValidationError
from .rule_matcher import matches_rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Occurrence:
    """One calendar instance of a rule, before any context is attached."""
    date: date
    rule_id: Optional[str] = None
    csst_id: Optional[str] = None  # rule-level teaching assignment
    starts_at: Optional[datetime] = None  # UTC
    ends_at: Optional[datetime] = None  # UTC
    rule: Optional[RuleSnapshot] = None


def validate_date_range(start_date: date, end_date: date, max_days: int) -> int:
    """Return the inclusive day span, or raise ScheduleValidationError."""
    if end_date < start_date:
        raise ScheduleValidationError(
            f"invalid date range: start_date ({start_date.isoformat()}) "
            f"after end_date ({end_date.isoformat()})"
        )
    span = inclusive_day_span(start_date, end_date)
    if span > max_days:
        raise ScheduleValidationError(
            f"date range too long: {span} days (max {max_days})"
        )
    return span


def occurrence_window(day: date, rule, tz: tzinfo) -> Tuple[datetime, datetime]:
    """
    UTC start/end of a rule's occurrence on `day`.

    Times of day are interpreted in `tz`. An end at or before the start means
    the session runs past midnight, so the end moves 24 elapsed hours (not
    24 wall-clock hours) forward.
    """
    starts_at = to_utc(combine_local(day, parse_time_of_day(rule.start_time), tz))
    ends_at = to_utc(combine_local(day, parse_time_of_day(rule.end_time), tz))
    if ends_at <= starts_at:
        ends_at += timedelta(hours=24)
    return starts_at, ends_at


def expand_occurrences(
    start_date: date,
    end_date: date,
    rules: Sequence,
    tz: tzinfo,
    *,
    max_days: int,
    check_cancelled: Optional[Callable[[], None]] = None,
) -> List[Occurrence]:
    """
    Expand rules into occurrences for every date in [start_date, end_date].

    Dates are walked in order and, per date, rules in the given order. A
    schedule without rules yields a single untimed occurrence on start_date.
    Rules whose times cannot be parsed are skipped.
    """
    validate_date_range(start_date, end_date, max_days)

    if not rules:
        return [Occurrence(date=start_date)]

    occurrences: List[Occurrence] = []
    snapshots: Dict[str, RuleSnapshot] = {}
    broken_rules: set = set()
    for day in iter_days(start_date, end_date):
        if check_cancelled is not None:
            check_cancelled()
        for rule in rules:
            if rule.id in broken_rules or not matches_rule(day, start_date, rule):
                continue
            try:
                starts_at, ends_at = occurrence_window(day, rule, tz)
            except ValueError as exc:
                logger.warning(f"[OccurrenceExpander] skipping rule {rule.id}: {exc}")
                broken_rules.add(rule.id)
                continue
            if rule.id not in snapshots:
                snapshots[rule.id] = RuleSnapshot.from_rule(
                    rule,
                    parse_time_of_day(rule.start_time),
                    parse_time_of_day(rule.end_time),
                )
            occurrences.append(
                Occurrence(
                    date=day,
                    rule_id=rule.id,
                    csst_id=rule.csst_id,
                    starts_at=starts_at,
                    ends_at=ends_at,
                    rule=snapshots[rule.id],
                )
            )
    return occurrences
