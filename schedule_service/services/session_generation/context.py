# schedule_service/services/session_generation/context.py
"""
Per-invocation state of a session generation run.

Everything a run caches (teaching assignments, resolved rooms, meeting-number
counters) hangs off a GenerationContext created for that call, so concurrent
runs never share state.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

from .exceptions import GenerationCancelledError

logger = logging.getLogger(__name__)


@dataclass
class AssignmentInfo:
    """The slice of a teaching assignment the generator needs."""
    id: str
    school_id: str
    slug: str
    display_name: Optional[str] = None
    subject_name: Optional[str] = None
    teacher_id: Optional[str] = None
    room_id: Optional[str] = None
    section_id: Optional[str] = None
    section_name: Optional[str] = None

    @classmethod
    def from_model(cls, assignment) -> "AssignmentInfo":
        section = assignment.section
        return cls(
            id=assignment.id,
            school_id=assignment.school_id,
            slug=assignment.effective_slug,
            display_name=assignment.display_name,
            subject_name=assignment.subject_name,
            teacher_id=assignment.teacher_id,
            room_id=assignment.room_id,
            section_id=assignment.section_id,
            section_name=section.name if section is not None else None,
        )

    def as_snapshot(self, captured_at: str) -> Dict[str, Any]:
        """Assignment fields as stored on a generated session; None values are left out."""
        snapshot = {
            "csst_id": self.id,
            "school_id": self.school_id,
            "slug": self.slug,
            "source": "generator",
            "captured_at": captured_at,
            "name": self.display_name,
            "subject_name": self.subject_name,
            "teacher_id": self.teacher_id,
            "room_id": self.room_id,
            "section_id": self.section_id,
            "section_name": self.section_name,
        }
        return {key: value for key, value in snapshot.items() if value is not None}


@dataclass
class GenerationContext:
    school_id: str
    schedule_id: str
    tz: tzinfo
    cancel_event: Optional[threading.Event] = None
    deadline: Optional[float] = None  # time.monotonic() based

    # csst id -> info, or None when loading failed (soft-fail, not retried)
    assignments: Dict[str, Optional[AssignmentInfo]] = field(default_factory=dict)
    # csst id -> room id, or None when nothing could be resolved
    rooms: Dict[str, Optional[str]] = field(default_factory=dict)
    # one timestamp for every snapshot written by the run
    captured_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @classmethod
    def start(
        cls,
        *,
        school_id: str,
        schedule_id: str,
        tz: tzinfo,
        cancel_event: Optional[threading.Event] = None,
        timeout_seconds: Optional[float] = None,
    ) -> "GenerationContext":
        deadline = None
        if timeout_seconds is not None:
            deadline = time.monotonic() + timeout_seconds
        return cls(
            school_id=school_id,
            schedule_id=schedule_id,
            tz=tz,
            cancel_event=cancel_event,
            deadline=deadline,
        )

    def remaining_seconds(self) -> Optional[float]:
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def is_cancelled(self) -> bool:
        if self.cancel_event is not None and self.cancel_event.is_set():
            return True
        remaining = self.remaining_seconds()
        return remaining is not None and remaining <= 0

    def check_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise GenerationCancelledError(
                f"Session generation for schedule {self.schedule_id} was cancelled"
            )
        remaining = self.remaining_seconds()
        if remaining is not None and remaining <= 0:
            raise GenerationCancelledError(
                f"Session generation for schedule {self.schedule_id} timed out"
            )

    def bound_statement_timeout(self, db: Session) -> None:
        """
        Cap the current PostgreSQL transaction at the remaining run time.

        Uses a transaction-local setting, so it ends with the next commit or
        rollback and never leaks onto pooled connections. No-op without a
        deadline or on other dialects.
        """
        remaining = self.remaining_seconds()
        if remaining is None or db.get_bind().dialect.name != "postgresql":
            return
        self.check_cancelled()
        timeout_ms = max(1, int(remaining * 1000))
        db.execute(
            text("SELECT set_config('statement_timeout', :timeout, true)"),
            {"timeout": str(timeout_ms)},
        )
