# schedule_service/constants/sessions.py
"""
Constants for attendance sessions, session types and schedule rules.

Provides type-safe constants to replace hardcoded strings throughout the codebase.
"""


class SessionStatus:
    """Lifecycle status of an attendance session."""
    SCHEDULED = "scheduled"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELED = "canceled"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.SCHEDULED, cls.ONGOING, cls.COMPLETED, cls.CANCELED]

    @classmethod
    def is_valid(cls, status: str) -> bool:
        return status in cls.all_values()


class AttendanceStatus:
    """Whether attendance can still be taken for a session."""
    OPEN = "open"
    CLOSED = "closed"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.OPEN, cls.CLOSED]

    @classmethod
    def is_valid(cls, status: str) -> bool:
        return status in cls.all_values()


class AttendanceWindowMode:
    """When attendance may be recorded, relative to the session."""
    ANYTIME = "anytime"
    SAME_DAY = "same_day"
    THREE_DAYS = "three_days"
    SESSION_TIME = "session_time"
    RELATIVE_WINDOW = "relative_window"

    @classmethod
    def all_values(cls) -> list[str]:
        return [
            cls.ANYTIME,
            cls.SAME_DAY,
            cls.THREE_DAYS,
            cls.SESSION_TIME,
            cls.RELATIVE_WINDOW,
        ]

    @classmethod
    def is_valid(cls, mode: str) -> bool:
        return mode in cls.all_values()


class WeekParity:
    """Week parity filter of a schedule rule."""
    ODD = "odd"
    EVEN = "even"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.ODD, cls.EVEN]

    @classmethod
    def is_valid(cls, parity: str) -> bool:
        return parity in cls.all_values()
