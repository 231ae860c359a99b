# schedule_service/schemas/generation.py
import threading
from datetime import time
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schedule_service.constants.sessions import AttendanceStatus, AttendanceWindowMode
from schedule_service.core.config import settings


class GenerateOptions(BaseModel):
    """Caller-supplied defaults and limits for one generation run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    timezone: Optional[str] = None
    default_csst_id: Optional[str] = None
    default_room_id: Optional[str] = None
    default_teacher_id: Optional[str] = None
    default_session_type_id: Optional[str] = None
    default_attendance_status: Optional[str] = None
    batch_size: Optional[int] = None

    # Cancellation: either signal aborts the run between dates/batches.
    timeout_seconds: Optional[float] = Field(default=None, gt=0)
    cancel_event: Optional[threading.Event] = Field(default=None, exclude=True)

    @field_validator(
        "default_csst_id",
        "default_room_id",
        "default_teacher_id",
        "default_session_type_id",
        "timezone",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @field_validator("default_attendance_status")
    @classmethod
    def validate_attendance_status(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        normalized = value.strip().lower()
        if not normalized:
            return None
        if not AttendanceStatus.is_valid(normalized):
            raise ValueError(
                f"default_attendance_status must be one of {AttendanceStatus.all_values()}"
            )
        return normalized

    @property
    def effective_timezone(self) -> str:
        return self.timezone or settings.DEFAULT_TIMEZONE

    @property
    def effective_batch_size(self) -> int:
        if self.batch_size is None or self.batch_size <= 0:
            return settings.GENERATION_BATCH_SIZE
        return self.batch_size

    @property
    def effective_attendance_status(self) -> str:
        return self.default_attendance_status or AttendanceStatus.OPEN


class GenerateSessionsRequest(BaseModel):
    """Request body of the generate-sessions endpoint."""

    timezone: Optional[str] = Field(default=None, json_schema_extra={"example": "Asia/Jakarta"})
    default_csst_id: Optional[str] = None
    default_room_id: Optional[str] = None
    default_teacher_id: Optional[str] = None
    default_session_type_id: Optional[str] = None
    default_attendance_status: Optional[str] = Field(
        default=None, json_schema_extra={"example": "open"}
    )
    batch_size: Optional[int] = None
    timeout_seconds: Optional[float] = Field(default=None, gt=0)

    def to_options(self) -> GenerateOptions:
        return GenerateOptions(**self.model_dump())


class GenerateSessionsResponse(BaseModel):
    schedule_id: str
    sessions_generated: int



# Reasons recorded when a session type leaves require_attendance_reason empty.
DEFAULT_REQUIRED_REASONS = ("unmarked",)


class SessionTypeSnapshot(BaseModel):
    """
    Immutable copy of a session type taken when sessions are generated.

    Every generated row receives `as_dict()`, a fresh plain mapping with the
    same content, so editing the type afterwards (or mutating one row's
    snapshot) never leaks into other sessions.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    school_id: str
    slug: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None

    allow_student_self_attendance: bool = True
    allow_teacher_mark_attendance: bool = True
    require_teacher_attendance: bool = True
    require_attendance_reason: tuple[str, ...] = DEFAULT_REQUIRED_REASONS

    attendance_window_mode: str
    attendance_open_offset_minutes: Optional[int] = None
    attendance_close_offset_minutes: Optional[int] = None

    @field_validator("description", "color", "icon", mode="before")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("require_attendance_reason", mode="before")
    @classmethod
    def coerce_reasons(cls, value: Optional[List[str]]) -> tuple[str, ...]:
        return tuple(value or ()) or DEFAULT_REQUIRED_REASONS

    @field_validator("attendance_window_mode", mode="before")
    @classmethod
    def default_window_mode(cls, value: Optional[str]) -> str:
        mode = (value or "").strip().lower()
        return mode or AttendanceWindowMode.SAME_DAY

    def as_dict(self) -> Dict[str, Any]:
        """Snapshot keyed by `type_id`; unset optional fields are left out."""
        data = self.model_dump(exclude_none=True)
        data = {"type_id": data.pop("id"), **data}
        data["require_attendance_reason"] = list(self.require_attendance_reason)
        return data


class RuleSnapshot(BaseModel):
    """Copy of the schedule rule an occurrence was expanded from."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    schedule_id: str
    day_of_week: int
    start_time: str  # "HH:MM:SS"
    end_time: str
    interval_weeks: int = 1
    start_offset_weeks: int = 0
    week_parity: Optional[str] = None
    weeks_of_month: tuple[int, ...] = ()
    last_week_of_month: bool = False

    @classmethod
    def from_rule(cls, rule, start_time: time, end_time: time) -> "RuleSnapshot":
        parity = (rule.week_parity or "").strip().lower()
        return cls(
            rule_id=rule.id,
            schedule_id=rule.schedule_id,
            day_of_week=rule.day_of_week,
            start_time=start_time.strftime("%H:%M:%S"),
            end_time=end_time.strftime("%H:%M:%S"),
            interval_weeks=rule.interval_weeks or 1,
            start_offset_weeks=rule.start_offset_weeks or 0,
            week_parity=parity or None,
            weeks_of_month=tuple(int(w) for w in rule.weeks_of_month or ()),
            last_week_of_month=bool(rule.last_week_of_month),
        )

    def as_dict(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_none=True)
        if self.weeks_of_month:
            data["weeks_of_month"] = list(self.weeks_of_month)
        else:
            data.pop("weeks_of_month")
        return data
