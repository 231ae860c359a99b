# schedule_service/services/session_generation/generator.py
"""
Schedule session generator.

Expands a schedule's recurring rules into concrete attendance sessions:

1. load and validate the schedule (date range, span limit);
2. resolve the session type and snapshot it;
3. expand the rules day by day in the school's timezone;
4. drop dates that already hold a session of this schedule;
5. build rows (teacher, room, meeting number, title, slug);
6. insert in batches, ignoring rows that already exist.

Running it again over the same schedule inserts nothing new.
"""

import logging
from typing import Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from schedule_service.core.config import settings
from schedule_service.crud import attendance_session_crud, schedule_crud
from schedule_service.schemas.generation import GenerateOptions
from schedule_service.utils.calendar_utils import load_timezone
from .context import GenerationContext
from .exceptions import ScheduleNotFoundError, SessionPersistenceError
from .meeting_numbers import MeetingNumberAllocator
from .occurrence_expander import expand_occurrences, validate_date_range
from .persister import persist_sessions
from .session_builder import SessionBuilder, load_default_assignment
from .session_type_resolver import resolve_session_type

logger = logging.getLogger(__name__)


class SessionGenerator:
    def __init__(self, db: Session):
        self.db = db

    def generate_occurrences(
        self,
        schedule_id: str,
        options: Optional[GenerateOptions] = None,
        *,
        school_id: Optional[str] = None,
    ) -> int:
        """
        Generate the sessions of a schedule. Returns the number inserted.

        When `school_id` is given, a schedule of another school is reported
        as not found.
        """
        opts = options or GenerateOptions()
        db = self.db

        schedule = schedule_crud.get(db, schedule_id)
        if schedule is None or (school_id is not None and schedule.school_id != school_id):
            raise ScheduleNotFoundError(f"Schedule {schedule_id} not found")

        validate_date_range(schedule.start_date, schedule.end_date, settings.MAX_SCHEDULE_DAYS)

        ctx = GenerationContext.start(
            school_id=schedule.school_id,
            schedule_id=schedule.id,
            tz=load_timezone(opts.effective_timezone),
            cancel_event=opts.cancel_event,
            timeout_seconds=opts.timeout_seconds,
        )
        ctx.check_cancelled()

        rules = schedule_crud.get_rules(db, schedule.id)
        session_type = resolve_session_type(db, ctx.school_id, opts.default_session_type_id)
        default_assignment = load_default_assignment(db, ctx, opts.default_csst_id)

        csst_ids: Set[str] = {rule.csst_id for rule in rules if rule.csst_id}
        if default_assignment is not None:
            csst_ids.add(default_assignment.id)
        meeting_numbers = MeetingNumberAllocator.preload(db, ctx.school_id, csst_ids)

        try:
            occupied = attendance_session_crud.get_occupied_dates(db, ctx.school_id, schedule.id)
        except SQLAlchemyError as exc:
            db.rollback()
            raise SessionPersistenceError(
                f"Failed to load existing sessions of schedule {schedule.id}: {exc}"
            ) from exc

        occurrences = expand_occurrences(
            schedule.start_date,
            schedule.end_date,
            rules,
            ctx.tz,
            max_days=settings.MAX_SCHEDULE_DAYS,
            check_cancelled=ctx.check_cancelled,
        )

        builder = SessionBuilder(db, ctx, opts, meeting_numbers, session_type)
        rows = []
        for occurrence in occurrences:
            if occurrence.date in occupied:
                continue
            occupied.add(occurrence.date)
            rows.append(builder.build(occurrence))

        skipped = len(occurrences) - len(rows)
        logger.info(
            f"[SessionGenerator] schedule {schedule.id}: {len(occurrences)} occurrence(s) "
            f"from {len(rules)} rule(s), {skipped} on already occupied dates"
        )

        inserted = persist_sessions(db, ctx, rows, opts.effective_batch_size)
        logger.info(f"[SessionGenerator] schedule {schedule.id}: inserted {inserted} session(s)")
        return inserted
