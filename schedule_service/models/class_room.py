# schedule_service/models/class_room.py
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Index, text
from sqlalchemy.sql import func
from schedule_service.db.base_class import Base


class ClassRoom(Base):
    __tablename__ = "class_rooms"

    id = Column(
        String, primary_key=True, default=lambda: f"room_{uuid.uuid4().hex[:12]}"
    )
    school_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=True)
    is_virtual = Column(Boolean, nullable=False, server_default=text("false"))
    is_active = Column(Boolean, nullable=False, server_default=text("true"))

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index(
            "uq_class_rooms_school_slug_alive",
            "school_id",
            "slug",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )
