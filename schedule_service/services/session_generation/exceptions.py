# schedule_service/services/session_generation/exceptions.py


class SessionGenerationError(Exception):
    """Base class for errors that abort a session generation run."""


class ScheduleValidationError(SessionGenerationError):
    """The schedule's date range cannot be expanded (reversed or too long)."""


class ScheduleNotFoundError(SessionGenerationError):
    pass


class SessionTypeNotFoundError(SessionGenerationError):
    """Explicit session type is missing, inactive, deleted or owned by another school."""


class TeachingAssignmentNotFoundError(SessionGenerationError):
    """Default teaching assignment is missing or owned by another school."""


class TenantMismatchError(SessionGenerationError):
    pass


class GenerationCancelledError(SessionGenerationError):
    """The caller's cancel signal fired or the run exceeded its timeout."""


class SessionPersistenceError(SessionGenerationError):
    """
    A batch insert failed for a reason other than a duplicate session.

    Batches committed before the failure stay in the database.
    """

    def __init__(self, message: str, inserted_before_failure: int = 0):
        super().__init__(message)
        self.inserted_before_failure = inserted_before_failure
