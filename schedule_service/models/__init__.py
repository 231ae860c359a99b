# schedule_service/models/__init__.py
# Importing every model here registers all tables on Base.metadata.

from .class_room import ClassRoom
from .class_section import ClassSection
from .teaching_assignment import TeachingAssignment
from .schedule import Schedule
from .schedule_rule import ScheduleRule
from .session_type import SessionType
from .attendance_session import AttendanceSession
