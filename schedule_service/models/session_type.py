# schedule_service/models/session_type.py
import uuid
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, Index, func, text
from schedule_service.db.base_class import Base, ArrayType


class SessionType(Base):
    """
    Tenant-level category of attendance sessions (regular class, exam, ...).

    Carries display metadata and the attendance-taking configuration. Sessions
    embed a snapshot of these fields at generation time, so later edits to a
    type never change sessions that already exist.
    """
    __tablename__ = "class_attendance_session_types"

    id = Column(
        String, primary_key=True, default=lambda: f"cst_{uuid.uuid4().hex[:12]}"
    )
    school_id = Column(String, nullable=False, index=True)
    slug = Column(String, nullable=False)
    name = Column(String, nullable=False)

    # Display metadata
    description = Column(Text, nullable=True)
    color = Column(String(20), nullable=True)
    icon = Column(String(64), nullable=True)
    is_active = Column(Boolean, nullable=False, server_default=text("true"))
    sort_order = Column(Integer, nullable=False, server_default="0")

    # Attendance configuration
    allow_student_self_attendance = Column(Boolean, nullable=False, server_default=text("true"))
    allow_teacher_mark_attendance = Column(Boolean, nullable=False, server_default=text("true"))
    require_teacher_attendance = Column(Boolean, nullable=False, server_default=text("true"))
    require_attendance_reason = Column(ArrayType(String), nullable=True)  # e.g. ["unmarked"]

    # anytime, same_day, three_days, session_time, relative_window
    attendance_window_mode = Column(String(32), nullable=False, server_default="same_day")
    attendance_open_offset_minutes = Column(Integer, nullable=True)
    attendance_close_offset_minutes = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index(
            "uq_castype_school_slug_alive",
            "school_id",
            func.lower(slug),
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )
