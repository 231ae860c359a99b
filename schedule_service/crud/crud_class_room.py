# schedule_service/crud/crud_class_room.py
from typing import Optional
from sqlalchemy.orm import Session
from schedule_service.crud.helpers import get_or_create
from schedule_service.models.class_room import ClassRoom
from schedule_service.utils.slug import section_room_slug


class CRUDClassRoom:
    """Class room lookups plus idempotent provisioning of section rooms."""

    def get_by_slug(self, db: Session, school_id: str, slug: str) -> Optional[ClassRoom]:
        return (
            db.query(ClassRoom)
            .filter(
                ClassRoom.school_id == school_id,
                ClassRoom.slug == slug,
                ClassRoom.deleted_at.is_(None),
            )
            .first()
        )

    def get_or_create_for_section(
        self,
        db: Session,
        school_id: str,
        section_id: str,
        section_name: Optional[str] = None,
    ) -> ClassRoom:
        """
        Room dedicated to a class section, created on first use.

        The slug is derived from the section id, so repeated calls (and
        repeated generation runs) always land on the same room.
        """
        slug = section_room_slug(section_id)
        name = "Ruang"
        if section_name and section_name.strip():
            name = f"Ruang {section_name.strip()}"

        return get_or_create(
            db,
            lookup=lambda: self.get_by_slug(db, school_id, slug),
            factory=lambda: ClassRoom(
                school_id=school_id,
                name=name,
                slug=slug,
                is_virtual=False,
                is_active=True,
            ),
            label=f"class_room[{school_id}/{slug}]",
        )


class_room_crud = CRUDClassRoom()
