from datetime import date, datetime, timezone

import pytest
from unittest.mock import MagicMock

from schedule_service.crud import attendance_session_crud
from schedule_service.models import AttendanceSession
from schedule_service.models.attendance_session import new_attendance_session_id

SCHOOL_ID = "school_abc"


def make_row(schedule_id, day, **overrides):
    row = {
        "id": new_attendance_session_id(),
        "school_id": SCHOOL_ID,
        "schedule_id": schedule_id,
        "rule_id": None,
        "date": day,
        "starts_at": None,
        "ends_at": None,
        "teacher_id": None,
        "room_id": None,
        "csst_id": None,
        "type_id": None,
        "type_snapshot": None,
        "meeting_number": None,
        "title": None,
        "slug": None,
        "status": "scheduled",
        "attendance_status": "open",
        "is_locked": False,
        "is_override": False,
        "is_canceled": False,
        "general_info": "",
    }
    row.update(overrides)
    return row


def test_insert_skips_existing_dates(db_session, make_schedule):
    schedule = make_schedule()
    rows = [make_row(schedule.id, date(2025, 1, 6)), make_row(schedule.id, date(2025, 1, 13))]
    assert attendance_session_crud.insert_ignore_conflicts(db_session, rows) == 2

    again = [make_row(schedule.id, date(2025, 1, 13)), make_row(schedule.id, date(2025, 1, 20))]
    assert attendance_session_crud.insert_ignore_conflicts(db_session, again) == 1
    assert db_session.query(AttendanceSession).count() == 3


def test_soft_deleted_session_does_not_block_date(db_session, make_schedule):
    schedule = make_schedule()
    deleted = AttendanceSession(
        school_id=SCHOOL_ID,
        schedule_id=schedule.id,
        date=date(2025, 1, 6),
        deleted_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )
    db_session.add(deleted)
    db_session.commit()

    assert attendance_session_crud.insert_ignore_conflicts(
        db_session, [make_row(schedule.id, date(2025, 1, 6))]
    ) == 1
    assert attendance_session_crud.get_occupied_dates(db_session, SCHOOL_ID, schedule.id) == {
        date(2025, 1, 6)
    }


def test_insert_of_empty_batch(db_session):
    assert attendance_session_crud.insert_ignore_conflicts(db_session, []) == 0


def test_max_meeting_numbers_grouped_by_assignment(db_session, make_schedule, make_assignment):
    schedule = make_schedule()
    math = make_assignment()
    art = make_assignment()
    rows = [
        make_row(schedule.id, date(2025, 1, 6), csst_id=math.id, meeting_number=1),
        make_row(schedule.id, date(2025, 1, 7), csst_id=math.id, meeting_number=7),
        make_row(schedule.id, date(2025, 1, 8), csst_id=art.id, meeting_number=3),
        make_row(schedule.id, date(2025, 1, 9), csst_id=art.id, meeting_number=None),
    ]
    attendance_session_crud.insert_ignore_conflicts(db_session, rows)

    result = attendance_session_crud.get_max_meeting_numbers(
        db_session, SCHOOL_ID, [math.id, art.id, "csst_unused"]
    )

    assert result == {math.id: 7, art.id: 3}
    assert attendance_session_crud.get_max_meeting_numbers(db_session, SCHOOL_ID, []) == {}


def test_unsupported_dialect_is_rejected():
    db = MagicMock()
    db.get_bind.return_value.dialect.name = "mysql"
    with pytest.raises(NotImplementedError):
        attendance_session_crud.insert_ignore_conflicts(db, [{"id": "cas_x"}])
