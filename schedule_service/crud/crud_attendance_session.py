# schedule_service/crud/crud_attendance_session.py
import logging
from datetime import date
from typing import Dict, Iterable, List, Set

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from schedule_service.models.attendance_session import AttendanceSession

logger = logging.getLogger(__name__)

_CONFLICT_IGNORING_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class CRUDAttendanceSession:
    """Queries and bulk writes used by the schedule session generator."""

    def get_max_meeting_numbers(
        self, db: Session, school_id: str, csst_ids: Iterable[str]
    ) -> Dict[str, int]:
        """
        Highest meeting number already persisted per teaching assignment.

        One grouped query for all ids; assignments without numbered live
        sessions are absent from the result.
        """
        ids = sorted(set(csst_ids))
        if not ids:
            return {}
        rows = (
            db.query(AttendanceSession.csst_id, func.max(AttendanceSession.meeting_number))
            .filter(
                AttendanceSession.school_id == school_id,
                AttendanceSession.csst_id.in_(ids),
                AttendanceSession.deleted_at.is_(None),
            )
            .group_by(AttendanceSession.csst_id)
            .all()
        )
        return {csst_id: max_no for csst_id, max_no in rows if max_no is not None}

    def get_occupied_dates(self, db: Session, school_id: str, schedule_id: str) -> Set[date]:
        """Dates that already hold a live session of the schedule."""
        rows = (
            db.query(AttendanceSession.date)
            .filter(
                AttendanceSession.school_id == school_id,
                AttendanceSession.schedule_id == schedule_id,
                AttendanceSession.deleted_at.is_(None),
            )
            .distinct()
            .all()
        )
        return {row[0] for row in rows}

    def insert_ignore_conflicts(self, db: Session, rows: List[dict]) -> int:
        """
        INSERT ... ON CONFLICT DO NOTHING for one batch, then commit.

        Rows colliding with the live (school, date, schedule) unique index are
        skipped by the database. Returns the number of rows actually inserted.
        All rows must carry the same keys.
        """
        if not rows:
            return 0

        dialect = db.get_bind().dialect.name
        insert_fn = _CONFLICT_IGNORING_INSERTS.get(dialect)
        if insert_fn is None:
            raise NotImplementedError(
                f"Conflict-ignoring insert is not supported for dialect '{dialect}'"
            )

        stmt = (
            insert_fn(AttendanceSession)
            .values(rows)
            .on_conflict_do_nothing()
            .returning(AttendanceSession.id)
        )
        inserted_ids = db.execute(stmt).scalars().all()
        db.commit()

        skipped = len(rows) - len(inserted_ids)
        if skipped:
            logger.debug(f"Skipped {skipped} already existing attendance session(s)")
        return len(inserted_ids)


attendance_session_crud = CRUDAttendanceSession()
