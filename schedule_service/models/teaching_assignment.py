# schedule_service/models/teaching_assignment.py
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from schedule_service.db.base_class import Base


class TeachingAssignment(Base):
    """
    Class-section-subject-teacher binding (CSST).

    Read-only for the session generator: it only supplies the teacher, the
    room (directly or through the section) and the display name/slug.
    """
    __tablename__ = "class_section_subject_teachers"

    id = Column(
        String, primary_key=True, default=lambda: f"csst_{uuid.uuid4().hex[:12]}"
    )
    school_id = Column(String, nullable=False, index=True)
    slug = Column(String, nullable=True)
    name = Column(String, nullable=True)
    subject_name = Column(String, nullable=True)
    teacher_id = Column(String, nullable=True)  # No FK - teacher roster lives elsewhere
    room_id = Column(
        String, ForeignKey("class_rooms.id", ondelete="SET NULL"), nullable=True
    )
    section_id = Column(
        String, ForeignKey("class_sections.id", ondelete="SET NULL"), nullable=True
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    section = relationship("ClassSection")

    @property
    def display_name(self) -> str | None:
        for candidate in (self.subject_name, self.name):
            if candidate and candidate.strip():
                return candidate.strip()
        if self.section is not None and self.section.name and self.section.name.strip():
            return self.section.name.strip()
        return None

    @property
    def effective_slug(self) -> str:
        if self.slug and self.slug.strip():
            return self.slug.strip()
        return self.id
