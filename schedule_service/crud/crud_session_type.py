# schedule_service/crud/crud_session_type.py
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from schedule_service.constants.sessions import AttendanceWindowMode
from schedule_service.core.config import settings
from schedule_service.crud.helpers import get_or_create
from schedule_service.models.session_type import SessionType

# Configuration of the type auto-created for sessions generated from schedules
DEFAULT_SESSION_TYPE_NAME = "Pertemuan KBM"
DEFAULT_SESSION_TYPE_DESCRIPTION = "Sesi kehadiran hasil generate otomatis dari jadwal"
DEFAULT_SESSION_TYPE_COLOR = "#2563eb"
DEFAULT_SESSION_TYPE_ICON = "CalendarCheck2"
DEFAULT_SESSION_TYPE_SORT_ORDER = 10
DEFAULT_REQUIRE_ATTENDANCE_REASON = ["unmarked"]


class CRUDSessionType:
    """CRUD operations for tenant-scoped attendance session types."""

    def get_active_for_school(
        self, db: Session, school_id: str, type_id: str
    ) -> Optional[SessionType]:
        """Type by id, only if it belongs to the school and is active and live."""
        return (
            db.query(SessionType)
            .filter(
                SessionType.id == type_id,
                SessionType.school_id == school_id,
                SessionType.is_active.is_(True),
                SessionType.deleted_at.is_(None),
            )
            .first()
        )

    def get_by_slug(self, db: Session, school_id: str, slug: str) -> Optional[SessionType]:
        """Live type of the school by slug (case-insensitive)."""
        return (
            db.query(SessionType)
            .filter(
                SessionType.school_id == school_id,
                func.lower(SessionType.slug) == slug.lower(),
                SessionType.deleted_at.is_(None),
            )
            .first()
        )

    def get_or_create_default(self, db: Session, school_id: str) -> SessionType:
        """
        The school's canonical type for generated sessions.

        Created with fixed defaults the first time it is needed; a concurrent
        creation is resolved by re-querying after the unique violation.
        """
        slug = settings.DEFAULT_SESSION_TYPE_SLUG
        return get_or_create(
            db,
            lookup=lambda: self.get_by_slug(db, school_id, slug),
            factory=lambda: SessionType(
                school_id=school_id,
                slug=slug,
                name=DEFAULT_SESSION_TYPE_NAME,
                description=DEFAULT_SESSION_TYPE_DESCRIPTION,
                color=DEFAULT_SESSION_TYPE_COLOR,
                icon=DEFAULT_SESSION_TYPE_ICON,
                is_active=True,
                sort_order=DEFAULT_SESSION_TYPE_SORT_ORDER,
                allow_student_self_attendance=True,
                allow_teacher_mark_attendance=True,
                require_teacher_attendance=True,
                require_attendance_reason=list(DEFAULT_REQUIRE_ATTENDANCE_REASON),
                attendance_window_mode=AttendanceWindowMode.SAME_DAY,
            ),
            label=f"session_type[{school_id}/{slug}]",
        )


session_type_crud = CRUDSessionType()
