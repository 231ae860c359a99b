# schedule_service/services/session_generation/__init__.py
from .exceptions import (
    GenerationCancelledError,
    ScheduleNotFoundError,
    ScheduleValidationError,
    SessionGenerationError,
    SessionPersistenceError,
    SessionTypeNotFoundError,
    TeachingAssignmentNotFoundError,
    TenantMismatchError,
)
from .generator import SessionGenerator
