# schedule_service/models/attendance_session.py
import uuid
from sqlalchemy import (
    Column, String, Text, Date, DateTime, Integer, Boolean, ForeignKey, Index, func, text
)
from schedule_service.db.base_class import Base, JSONType


def new_attendance_session_id() -> str:
    return f"cas_{uuid.uuid4().hex[:12]}"


class AttendanceSession(Base):
    """
    One concrete class meeting.

    Rows are produced by the schedule session generator (or created manually
    elsewhere) and soft-deleted through deleted_at. At most one live session
    exists per (school, date, schedule); the generator relies on that unique
    index to stay idempotent.
    """
    __tablename__ = "class_attendance_sessions"

    id = Column(String, primary_key=True, default=new_attendance_session_id)
    school_id = Column(String, nullable=False, index=True)
    schedule_id = Column(
        String, ForeignKey("class_schedules.id", ondelete="SET NULL"), nullable=True, index=True
    )
    rule_id = Column(
        String, ForeignKey("class_schedule_rules.id", ondelete="SET NULL"), nullable=True
    )

    date = Column(Date, nullable=False)
    starts_at = Column(DateTime(timezone=True), nullable=True)  # UTC
    ends_at = Column(DateTime(timezone=True), nullable=True)  # UTC

    # Resolved context
    teacher_id = Column(String, nullable=True, index=True)
    room_id = Column(
        String, ForeignKey("class_rooms.id", ondelete="SET NULL"), nullable=True
    )
    csst_id = Column(
        String,
        ForeignKey("class_section_subject_teachers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    csst_snapshot = Column(JSONType, nullable=True)
    rule_snapshot = Column(JSONType, nullable=True)

    # Session type + snapshot frozen at creation time
    type_id = Column(
        String,
        ForeignKey("class_attendance_session_types.id", ondelete="SET NULL"),
        nullable=True,
    )
    type_snapshot = Column(JSONType, nullable=True)

    meeting_number = Column(Integer, nullable=True)
    title = Column(String, nullable=True)
    slug = Column(String, nullable=True)

    status = Column(String(20), nullable=False, server_default="scheduled")  # scheduled, ongoing, completed, canceled
    attendance_status = Column(String(20), nullable=False, server_default="open")  # open, closed
    is_locked = Column(Boolean, nullable=False, server_default=text("false"))
    is_override = Column(Boolean, nullable=False, server_default=text("false"))
    is_canceled = Column(Boolean, nullable=False, server_default=text("false"))
    general_info = Column(Text, nullable=False, server_default="")

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index(
            "uq_cas_school_date_schedule_alive",
            "school_id",
            "date",
            func.coalesce(schedule_id, ""),
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        Index("idx_cas_csst_meeting_number", "csst_id", "meeting_number"),
    )
