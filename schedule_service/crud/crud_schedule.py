# schedule_service/crud/crud_schedule.py
from typing import List, Optional
from sqlalchemy.orm import Session
from schedule_service.models.schedule import Schedule
from schedule_service.models.schedule_rule import ScheduleRule


class CRUDSchedule:
    """Read access to schedules and their recurrence rules."""

    def get(self, db: Session, schedule_id: str) -> Optional[Schedule]:
        """Get a live (not soft-deleted) schedule by id."""
        return (
            db.query(Schedule)
            .filter(Schedule.id == schedule_id, Schedule.deleted_at.is_(None))
            .first()
        )

    def get_rules(self, db: Session, schedule_id: str) -> List[ScheduleRule]:
        """Live rules of a schedule, ordered by weekday then start time."""
        return (
            db.query(ScheduleRule)
            .filter(
                ScheduleRule.schedule_id == schedule_id,
                ScheduleRule.deleted_at.is_(None),
            )
            .order_by(ScheduleRule.day_of_week, ScheduleRule.start_time)
            .all()
        )


# Singleton instance
schedule_crud = CRUDSchedule()
