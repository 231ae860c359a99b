# schedule_service/services/session_generation/session_builder.py
"""
Turns expanded occurrences into attendance session rows.

For each occurrence the builder picks the effective teaching assignment
(the rule's, else the caller's default), then derives teacher, room,
meeting number, title and slug from it. Rule, assignment and session
type are copied into the row as snapshots. Problems with a rule-level
assignment never abort the run: the session is still built, just with
less context.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from schedule_service.constants.sessions import SessionStatus
from schedule_service.crud import teaching_assignment_crud
from schedule_service.models.attendance_session import new_attendance_session_id
from schedule_service.schemas.generation import GenerateOptions, SessionTypeSnapshot
from schedule_service.utils.slug import meeting_slug
from .context import AssignmentInfo, GenerationContext
from .exceptions import TeachingAssignmentNotFoundError, TenantMismatchError
from .meeting_numbers import MeetingNumberAllocator
from .occurrence_expander import Occurrence
from .room_resolver import RoomResolver

logger = logging.getLogger(__name__)


def load_default_assignment(
    db: Session, ctx: GenerationContext, csst_id: Optional[str]
) -> Optional[AssignmentInfo]:
    """
    The caller's default teaching assignment, validated up front.

    Unlike rule-level assignments, a bad default is the caller's mistake
    and aborts the run.
    """
    if not csst_id:
        return None
    assignment = teaching_assignment_crud.get(db, csst_id)
    if assignment is None or assignment.school_id != ctx.school_id:
        raise TeachingAssignmentNotFoundError(
            f"Teaching assignment {csst_id} not found for school {ctx.school_id}"
        )
    info = AssignmentInfo.from_model(assignment)
    ctx.assignments[csst_id] = info
    return info


class SessionBuilder:
    def __init__(
        self,
        db: Session,
        ctx: GenerationContext,
        options: GenerateOptions,
        meeting_numbers: MeetingNumberAllocator,
        session_type: Optional[SessionTypeSnapshot] = None,
    ):
        self.db = db
        self.ctx = ctx
        self.options = options
        self.meeting_numbers = meeting_numbers
        self.session_type = session_type
        self.room_resolver = RoomResolver(db, ctx)

    def _assignment(self, csst_id: str) -> Optional[AssignmentInfo]:
        if csst_id in self.ctx.assignments:
            return self.ctx.assignments[csst_id]

        info = None
        try:
            assignment = teaching_assignment_crud.get(self.db, csst_id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning(f"[SessionBuilder] failed to load teaching assignment {csst_id}: {exc}")
            assignment = None
        else:
            if assignment is None:
                logger.warning(f"[SessionBuilder] teaching assignment {csst_id} not found")
            elif assignment.school_id != self.ctx.school_id:
                logger.warning(
                    f"[SessionBuilder] teaching assignment {csst_id} belongs to another school"
                )
                assignment = None

        if assignment is not None:
            info = AssignmentInfo.from_model(assignment)
        self.ctx.assignments[csst_id] = info
        return info

    def _room(self, assignment: AssignmentInfo) -> Optional[str]:
        try:
            return self.room_resolver.resolve(assignment)
        except TenantMismatchError as exc:
            logger.warning(f"[SessionBuilder] no room for {assignment.id}: {exc}")
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning(f"[SessionBuilder] room resolution failed for {assignment.id}: {exc}")
        self.ctx.rooms[assignment.id] = None
        return None

    def build(self, occurrence: Occurrence) -> Dict[str, Any]:
        opts = self.options
        rule_csst_id = occurrence.csst_id
        csst_id = rule_csst_id or opts.default_csst_id

        assignment = self._assignment(csst_id) if csst_id else None

        teacher_id = opts.default_teacher_id
        if teacher_id is None and assignment is not None:
            teacher_id = assignment.teacher_id

        room_id = opts.default_room_id
        if room_id is None and rule_csst_id and assignment is not None:
            room_id = self._room(assignment)

        meeting_number = None
        title = None
        slug = None
        if csst_id:
            meeting_number = self.meeting_numbers.next(csst_id)
            base_slug = assignment.slug if assignment is not None else csst_id
            slug = meeting_slug(base_slug, meeting_number)
        if assignment is not None:
            title = assignment.display_name
            csst_snapshot = assignment.as_snapshot(self.ctx.captured_at)
        elif csst_id:
            csst_snapshot = {"csst_id": csst_id, "school_id": self.ctx.school_id}
        else:
            csst_snapshot = None

        session_type = self.session_type
        return {
            "id": new_attendance_session_id(),
            "school_id": self.ctx.school_id,
            "schedule_id": self.ctx.schedule_id,
            "rule_id": occurrence.rule_id,
            "date": occurrence.date,
            "starts_at": occurrence.starts_at,
            "ends_at": occurrence.ends_at,
            "teacher_id": teacher_id,
            "room_id": room_id,
            "csst_id": csst_id,
            "csst_snapshot": csst_snapshot,
            "rule_snapshot": occurrence.rule.as_dict() if occurrence.rule is not None else None,
            "type_id": session_type.id if session_type is not None else None,
            "type_snapshot": session_type.as_dict() if session_type is not None else None,
            "meeting_number": meeting_number,
            "title": title,
            "slug": slug,
            "status": SessionStatus.SCHEDULED,
            "attendance_status": opts.effective_attendance_status,
            "is_locked": False,
            "is_override": False,
            "is_canceled": False,
            "general_info": "",
        }
