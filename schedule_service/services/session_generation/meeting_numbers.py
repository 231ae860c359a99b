# schedule_service/services/session_generation/meeting_numbers.py
import logging
from collections import defaultdict
from typing import Dict, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from schedule_service.crud import attendance_session_crud

logger = logging.getLogger(__name__)


class MeetingNumberAllocator:
    """
    Sequential meeting numbers per teaching assignment.

    Numbering continues from the highest number already stored, so
    `number = stored max + position within this run`.
    """

    def __init__(self, offsets: Optional[Dict[str, int]] = None):
        self.offsets: Dict[str, int] = dict(offsets or {})
        self._counters: Dict[str, int] = defaultdict(int)

    @classmethod
    def preload(
        cls, db: Session, school_id: str, csst_ids: Iterable[str]
    ) -> "MeetingNumberAllocator":
        ids = {csst_id for csst_id in csst_ids if csst_id}
        try:
            offsets = attendance_session_crud.get_max_meeting_numbers(db, school_id, ids)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning(
                f"[MeetingNumberAllocator] preload failed for school {school_id}, "
                f"numbering from 1: {exc}"
            )
            offsets = {}
        return cls(offsets)

    def next(self, csst_id: str) -> int:
        self._counters[csst_id] += 1
        return self.offsets.get(csst_id, 0) + self._counters[csst_id]
