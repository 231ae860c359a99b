# schedule_service/models/schedule.py
import uuid
from sqlalchemy import Column, String, Date, DateTime, Boolean, CheckConstraint, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from schedule_service.db.base_class import Base


class Schedule(Base):
    """
    Date-bounded recurring schedule of a school.

    The weekly recurrence lives in ScheduleRule rows; the generator expands
    them into AttendanceSession rows between start_date and end_date.
    """
    __tablename__ = "class_schedules"

    id = Column(
        String, primary_key=True, default=lambda: f"sch_{uuid.uuid4().hex[:12]}"
    )
    school_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=True)
    slug = Column(String, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, server_default=text("true"))

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    rules = relationship(
        "ScheduleRule", back_populates="schedule", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="check_schedule_date_range"),
    )
