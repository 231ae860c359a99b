# schedule_service/crud/__init__.py

from .crud_attendance_session import attendance_session_crud
from .crud_class_room import class_room_crud
from .crud_schedule import schedule_crud
from .crud_session_type import session_type_crud
from .crud_teaching_assignment import teaching_assignment_crud
