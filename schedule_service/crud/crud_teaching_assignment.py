# schedule_service/crud/crud_teaching_assignment.py
from typing import Optional
from sqlalchemy.orm import Session, joinedload
from schedule_service.models.class_section import ClassSection
from schedule_service.models.teaching_assignment import TeachingAssignment


class CRUDTeachingAssignment:
    """Read-only lookups of teaching assignments (CSST) and their sections."""

    def get(self, db: Session, csst_id: str) -> Optional[TeachingAssignment]:
        """Live teaching assignment with its section eagerly loaded."""
        return (
            db.query(TeachingAssignment)
            .options(joinedload(TeachingAssignment.section))
            .filter(
                TeachingAssignment.id == csst_id,
                TeachingAssignment.deleted_at.is_(None),
            )
            .first()
        )

    def get_section(self, db: Session, section_id: str) -> Optional[ClassSection]:
        return (
            db.query(ClassSection)
            .filter(ClassSection.id == section_id, ClassSection.deleted_at.is_(None))
            .first()
        )


teaching_assignment_crud = CRUDTeachingAssignment()
