# schedule_service/services/session_generation/session_type_resolver.py
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from schedule_service.crud import session_type_crud
from schedule_service.schemas.generation import SessionTypeSnapshot
from .exceptions import SessionTypeNotFoundError

logger = logging.getLogger(__name__)


def resolve_session_type(
    db: Session, school_id: str, type_id: Optional[str]
) -> Optional[SessionTypeSnapshot]:
    """
    Session type stamped on every generated session, as a frozen snapshot.

    An explicit `type_id` must be an active, live type of the school. Without
    one, the school's default type is used and created if missing; when even
    that fails the run continues untyped.
    """
    if type_id:
        session_type = session_type_crud.get_active_for_school(db, school_id, type_id)
        if session_type is None:
            raise SessionTypeNotFoundError(
                f"Session type {type_id} not found or inactive for school {school_id}"
            )
        return SessionTypeSnapshot.model_validate(session_type)

    try:
        session_type = session_type_crud.get_or_create_default(db, school_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(
            f"[SessionTypeResolver] could not ensure default session type "
            f"for school {school_id}: {exc}"
        )
        return None
    return SessionTypeSnapshot.model_validate(session_type)
