# schedule_service/models/schedule_rule.py
import uuid
from sqlalchemy import (
    Column, String, Integer, Time, Boolean, DateTime, ForeignKey, CheckConstraint, text
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from schedule_service.db.base_class import Base, ArrayType


class ScheduleRule(Base):
    __tablename__ = "class_schedule_rules"

    id = Column(
        String, primary_key=True, default=lambda: f"rul_{uuid.uuid4().hex[:12]}"
    )
    school_id = Column(String, nullable=False, index=True)
    schedule_id = Column(
        String, ForeignKey("class_schedules.id", ondelete="CASCADE"), nullable=False, index=True
    )

    day_of_week = Column(Integer, nullable=False)  # ISO: 1=Monday .. 7=Sunday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)  # <= start_time means the session ends next day

    # Recurrence filters
    interval_weeks = Column(Integer, nullable=False, server_default="1")
    start_offset_weeks = Column(Integer, nullable=False, server_default="0")
    week_parity = Column(String(10), nullable=True)  # odd, even
    weeks_of_month = Column(ArrayType(Integer), nullable=True)  # 1..5, empty = any week
    last_week_of_month = Column(Boolean, nullable=False, server_default=text("false"))

    # Optional teaching assignment overriding the schedule-level default
    csst_id = Column(
        String,
        ForeignKey("class_section_subject_teachers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    schedule = relationship("Schedule", back_populates="rules")

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 1 AND 7", name="check_rule_day_of_week"),
        CheckConstraint("start_offset_weeks >= 0", name="check_rule_start_offset"),
    )
