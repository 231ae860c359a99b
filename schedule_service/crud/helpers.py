# schedule_service/crud/helpers.py
import logging
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType")


def get_or_create(
    db: Session,
    *,
    lookup: Callable[[], Optional[ModelType]],
    factory: Callable[[], ModelType],
    label: str,
) -> ModelType:
    """
    Idempotent get-or-create guarded by a unique index.

    1. Run `lookup`; return the row when it already exists.
    2. Otherwise add the object built by `factory` and commit.
    3. If the commit loses a race against a concurrent writer (unique
       violation), roll back and run `lookup` again.

    The IntegrityError is re-raised when the second lookup still finds
    nothing, since then the violation was not caused by a concurrent create.
    """
    existing = lookup()
    if existing is not None:
        return existing

    obj = factory()
    db.add(obj)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"[get_or_create] {label}: unique conflict on insert, re-querying")
        existing = lookup()
        if existing is None:
            raise
        return existing

    db.refresh(obj)
    logger.info(f"[get_or_create] {label}: created {getattr(obj, 'id', obj)}")
    return obj
