# schedule_service/models/class_section.py
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey
from schedule_service.db.base_class import Base


class ClassSection(Base):
    __tablename__ = "class_sections"

    id = Column(
        String, primary_key=True, default=lambda: f"sec_{uuid.uuid4().hex[:12]}"
    )
    school_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    room_id = Column(
        String, ForeignKey("class_rooms.id", ondelete="SET NULL"), nullable=True
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True)
