from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from schedule_service.crud import class_room_crud, session_type_crud
from schedule_service.crud.helpers import get_or_create
from schedule_service.models import ClassRoom, SessionType

SCHOOL_ID = "school_abc"


def make_integrity_error():
    return IntegrityError("INSERT", {}, Exception("duplicate key value violates unique constraint"))


def test_get_or_create_returns_existing_without_insert():
    db = MagicMock()
    existing = object()

    result = get_or_create(db, lookup=lambda: existing, factory=MagicMock(), label="thing")

    assert result is existing
    db.add.assert_not_called()
    db.commit.assert_not_called()


def test_get_or_create_requeries_after_unique_conflict():
    """A concurrent writer created the row between our lookup and commit."""
    db = MagicMock()
    db.commit.side_effect = make_integrity_error()
    winner = object()
    lookup = MagicMock(side_effect=[None, winner])

    result = get_or_create(db, lookup=lookup, factory=lambda: object(), label="thing")

    assert result is winner
    db.rollback.assert_called_once()
    assert lookup.call_count == 2


def test_get_or_create_reraises_when_conflict_is_not_a_race():
    db = MagicMock()
    db.commit.side_effect = make_integrity_error()
    lookup = MagicMock(return_value=None)

    with pytest.raises(IntegrityError):
        get_or_create(db, lookup=lookup, factory=lambda: object(), label="thing")
    db.rollback.assert_called_once()


def test_default_session_type_created_once(db_session):
    first = session_type_crud.get_or_create_default(db_session, SCHOOL_ID)
    second = session_type_crud.get_or_create_default(db_session, SCHOOL_ID)

    assert first.id == second.id
    assert first.id.startswith("cst_")
    assert first.require_attendance_reason == ["unmarked"]
    assert first.sort_order == 10
    assert db_session.query(SessionType).count() == 1


def test_default_session_type_slug_lookup_is_case_insensitive(db_session):
    db_session.add(SessionType(school_id=SCHOOL_ID, slug="KBM-Regular", name="Custom", attendance_window_mode="anytime"))
    db_session.commit()

    found = session_type_crud.get_or_create_default(db_session, SCHOOL_ID)

    assert found.name == "Custom"
    assert db_session.query(SessionType).count() == 1


def test_default_session_type_is_per_school(db_session):
    a = session_type_crud.get_or_create_default(db_session, "school_a")
    b = session_type_crud.get_or_create_default(db_session, "school_b")
    assert a.id != b.id


def test_inactive_type_is_not_returned_for_explicit_lookup(db_session):
    inactive = SessionType(school_id=SCHOOL_ID, slug="lama", name="Lama", is_active=False, attendance_window_mode="anytime")
    db_session.add(inactive)
    db_session.commit()

    assert session_type_crud.get_active_for_school(db_session, SCHOOL_ID, inactive.id) is None


def test_section_room_provisioned_idempotently(db_session):
    first = class_room_crud.get_or_create_for_section(db_session, SCHOOL_ID, "sec_AB-12", "XI IPS 2")
    second = class_room_crud.get_or_create_for_section(db_session, SCHOOL_ID, "sec_AB-12", "XI IPS 2")

    assert first.id == second.id
    assert first.slug == "section-secab12"
    assert first.name == "Ruang XI IPS 2"
    assert first.is_virtual is False
    assert db_session.query(ClassRoom).count() == 1


def test_section_room_without_section_name(db_session):
    room = class_room_crud.get_or_create_for_section(db_session, SCHOOL_ID, "sec_1", "  ")
    assert room.name == "Ruang"
