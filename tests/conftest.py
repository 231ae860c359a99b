# tests/conftest.py

from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from schedule_service.main import app
from schedule_service.api import deps
from schedule_service.db.session import get_db
from schedule_service.db.base_class import Base
from schedule_service import models  # noqa: F401  (registers tables)
from schedule_service.models import (
    ClassRoom,
    ClassSection,
    Schedule,
    ScheduleRule,
    TeachingAssignment,
)

SCHOOL_ID = "school_abc"


# --- In-memory test database ---
@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


# --- Mock Dependencies Setup ---
class MockTokenPayload:
    def __init__(self, sub="user_123", school_id=SCHOOL_ID):
        self.sub = sub
        self.school_id = school_id


def override_get_current_user():
    return MockTokenPayload()


@pytest.fixture(scope="function")
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_current_user] = override_get_current_user
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# --- Data factories ---
@pytest.fixture
def make_schedule(db_session):
    def _make(start=date(2025, 1, 6), end=date(2025, 1, 31), school_id=SCHOOL_ID):
        schedule = Schedule(school_id=school_id, name="Semester Genap", start_date=start, end_date=end)
        db_session.add(schedule)
        db_session.commit()
        db_session.refresh(schedule)
        return schedule

    return _make


@pytest.fixture
def make_rule(db_session):
    def _make(schedule, day_of_week=1, start=time(7, 30), end=time(9, 0), **kwargs):
        rule = ScheduleRule(
            school_id=schedule.school_id,
            schedule_id=schedule.id,
            day_of_week=day_of_week,
            start_time=start,
            end_time=end,
            **kwargs,
        )
        db_session.add(rule)
        db_session.commit()
        db_session.refresh(rule)
        return rule

    return _make


@pytest.fixture
def make_assignment(db_session):
    def _make(
        school_id=SCHOOL_ID,
        section_name="X IPA 1",
        section_room_id=None,
        room_id=None,
        **kwargs,
    ):
        section = ClassSection(school_id=school_id, name=section_name, room_id=section_room_id)
        db_session.add(section)
        db_session.flush()
        assignment = TeachingAssignment(
            school_id=school_id,
            section_id=section.id,
            room_id=room_id,
            **kwargs,
        )
        db_session.add(assignment)
        db_session.commit()
        db_session.refresh(assignment)
        return assignment

    return _make


@pytest.fixture
def make_room(db_session):
    def _make(school_id=SCHOOL_ID, name="Lab Komputer", slug=None):
        room = ClassRoom(school_id=school_id, name=name, slug=slug)
        db_session.add(room)
        db_session.commit()
        db_session.refresh(room)
        return room

    return _make
