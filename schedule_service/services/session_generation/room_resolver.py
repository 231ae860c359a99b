# schedule_service/services/session_generation/room_resolver.py
import logging
from typing import Optional

from sqlalchemy.orm import Session

from schedule_service.crud import class_room_crud, teaching_assignment_crud
from .context import AssignmentInfo, GenerationContext
from .exceptions import TenantMismatchError

logger = logging.getLogger(__name__)


class RoomResolver:
    """
    Picks the room for sessions of a teaching assignment.

    Order: the assignment's own room, then its section's room, then a room
    provisioned for the section on first use. Results are cached on the
    context per assignment, including "no room".
    """

    def __init__(self, db: Session, ctx: GenerationContext):
        self.db = db
        self.ctx = ctx

    def resolve(self, assignment: AssignmentInfo) -> Optional[str]:
        if assignment.id in self.ctx.rooms:
            return self.ctx.rooms[assignment.id]

        if assignment.school_id != self.ctx.school_id:
            raise TenantMismatchError(
                f"Teaching assignment {assignment.id} belongs to another school"
            )

        room_id = self._lookup(assignment)
        self.ctx.rooms[assignment.id] = room_id
        return room_id

    def _lookup(self, assignment: AssignmentInfo) -> Optional[str]:
        if assignment.room_id:
            return assignment.room_id
        if not assignment.section_id:
            return None

        section = teaching_assignment_crud.get_section(self.db, assignment.section_id)
        if section is None:
            logger.warning(
                f"[RoomResolver] section {assignment.section_id} of {assignment.id} not found"
            )
            return None
        if section.school_id != self.ctx.school_id:
            raise TenantMismatchError(
                f"Class section {section.id} belongs to another school"
            )
        if section.room_id:
            return section.room_id

        room = class_room_crud.get_or_create_for_section(
            self.db,
            school_id=self.ctx.school_id,
            section_id=section.id,
            section_name=section.name,
        )
        return room.id
