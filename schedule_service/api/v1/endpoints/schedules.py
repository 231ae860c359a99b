# schedule_service/api/v1/endpoints/schedules.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from schedule_service.api import deps
from schedule_service.db.session import get_db
from schedule_service.schemas.generation import (
    GenerateSessionsRequest,
    GenerateSessionsResponse,
)
from schedule_service.schemas.token import TokenPayload
from schedule_service.services.session_generation import (
    GenerationCancelledError,
    ScheduleNotFoundError,
    ScheduleValidationError,
    SessionPersistenceError,
    SessionTypeNotFoundError,
    SessionGenerator,
    TeachingAssignmentNotFoundError,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Schedules"])


@router.post(
    "/schools/{schoolId}/schedules/{scheduleId}/generate-sessions",
    response_model=GenerateSessionsResponse,
)
def generate_sessions(
    schoolId: str,
    scheduleId: str,
    request_in: GenerateSessionsRequest,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Expand a schedule's rules into attendance sessions.

    Safe to call repeatedly: sessions that already exist are skipped and
    `sessions_generated` only counts new rows.
    """
    if current_user.school_id != schoolId:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized"
        )

    try:
        options = request_in.to_options()
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        )

    try:
        inserted = SessionGenerator(db).generate_occurrences(
            scheduleId, options, school_id=schoolId
        )
    except ScheduleValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        )
    except (
        ScheduleNotFoundError,
        SessionTypeNotFoundError,
        TeachingAssignmentNotFoundError,
    ) as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except GenerationCancelledError as exc:
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(exc))
    except SessionPersistenceError as exc:
        logger.error(
            f"Generating sessions for schedule {scheduleId} failed after "
            f"{exc.inserted_before_failure} inserted: {exc}"
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to persist generated sessions",
        )

    return GenerateSessionsResponse(schedule_id=scheduleId, sessions_generated=inserted)
