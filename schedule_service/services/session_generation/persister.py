# schedule_service/services/session_generation/persister.py
import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from schedule_service.crud import attendance_session_crud
from .context import GenerationContext
from .exceptions import GenerationCancelledError, SessionPersistenceError

logger = logging.getLogger(__name__)


def persist_sessions(
    db: Session, ctx: GenerationContext, rows: List[dict], batch_size: int
) -> int:
    """
    Insert rows in batches, skipping ones that already exist.

    Each batch commits on its own. On failure the current batch is rolled
    back and the rest is not attempted; earlier batches stay committed.
    Returns the number of rows actually inserted.
    """
    inserted = 0
    for start in range(0, len(rows), batch_size):
        ctx.check_cancelled()
        batch = rows[start:start + batch_size]
        try:
            ctx.bound_statement_timeout(db)
            inserted += attendance_session_crud.insert_ignore_conflicts(db, batch)
        except SQLAlchemyError as exc:
            db.rollback()
            if ctx.is_cancelled():
                raise GenerationCancelledError(
                    f"Session generation for schedule {ctx.schedule_id} timed out "
                    f"after inserting {inserted} session(s)"
                ) from exc
            logger.error(
                f"[Persister] batch at offset {start} failed for schedule "
                f"{ctx.schedule_id}: {exc}"
            )
            raise SessionPersistenceError(
                f"Failed to insert attendance sessions: {exc}",
                inserted_before_failure=inserted,
            ) from exc
        except NotImplementedError as exc:
            db.rollback()
            logger.error(f"[Persister] cannot insert sessions for schedule {ctx.schedule_id}: {exc}")
            raise SessionPersistenceError(
                f"Failed to insert attendance sessions: {exc}",
                inserted_before_failure=inserted,
            ) from exc
        logger.debug(f"[Persister] batch at offset {start}: {len(batch)} row(s), {inserted} inserted so far")
    return inserted
