import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import uuid
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.clock import FixedClock
from app.core.config import settings
from app.core.constants import ApprovalStatusEnum, RecordStatusEnum
from app.core.database import Base, build_engine
from app.models.lesson import Lesson
from app.models.lesson_schedule import LessonSchedule
from app.models.school_year import SchoolYear
from app.models.user import StudentAccount, TeacherAccount
from app.utils import deps as deps_utils
from app.utils.events import event_bus
from app.utils.slug import derive_slug
import main
from tests.helpers.fakes import NOW

test_db_url = settings.TEST_DATABASE_URL or "sqlite://"


@pytest.fixture(scope="function")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = build_engine(test_db_url, poolclass=StaticPool)
    else:
        engine = build_engine(test_db_url)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()

@pytest.fixture(scope="function")
def db_session(database_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()

@pytest.fixture
def clock():
    return FixedClock(NOW)

@pytest.fixture(autouse=True)
def _reset_event_bus():
    yield
    event_bus.clear()

@pytest.fixture(scope="function")
def client(db_session, clock):
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_transactional_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_clock] = lambda: clock
    test_client = TestClient(main.app)
    try:
        yield test_client
    finally:
        main.app.dependency_overrides.clear()


@pytest.fixture
def teacher_factory(db_session):
    def _teacher_factory(full_name="Test Teacher"):
        teacher = TeacherAccount(full_name=full_name, email=f"teacher-{uuid.uuid4().hex[:8]}@test.com", is_active=True)
        db_session.add(teacher)
        db_session.commit()
        db_session.refresh(teacher)
        return teacher
    return _teacher_factory

@pytest.fixture
def student_factory(db_session):
    def _student_factory(teacher=None, approval_status=ApprovalStatusEnum.APPROVED, full_name="Test Student"):
        student = StudentAccount(
            full_name=full_name,
            email=f"student-{uuid.uuid4().hex[:8]}@test.com",
            approval_status=approval_status,
            teacher_id=teacher.id if teacher else None,
        )
        db_session.add(student)
        db_session.commit()
        db_session.refresh(student)
        return student
    return _student_factory

@pytest.fixture
def school_year_factory(db_session):
    def _school_year_factory(teachers=(), start_date=NOW - timedelta(days=90), end_date=NOW + timedelta(days=270),
                             status=RecordStatusEnum.PUBLISHED, title="SY 2024-2025"):
        school_year = SchoolYear(title=title, status=status, start_date=start_date, end_date=end_date)
        school_year.teachers = list(teachers)
        db_session.add(school_year)
        db_session.commit()
        db_session.refresh(school_year)
        return school_year
    return _school_year_factory

@pytest.fixture
def lesson_factory(db_session):
    def _lesson_factory(teacher, school_year, order_number, title=None, status=RecordStatusEnum.PUBLISHED,
                        start_date=None, students=None):
        title = title or f"Lesson {order_number}"
        lesson = Lesson(
            status=status,
            order_number=order_number,
            title=title,
            slug=derive_slug(order_number, title),
            video_url=f"https://videos.test/{order_number}",
            duration_seconds=600,
            description=f"All about {title}",
            excerpt=f"{title} in short",
            teacher_id=teacher.id,
            school_year_id=school_year.id,
        )
        if start_date is not None:
            lesson.schedules = [LessonSchedule(start_date=start_date, students=list(students or []))]
        db_session.add(lesson)
        db_session.commit()
        db_session.refresh(lesson)
        return lesson
    return _lesson_factory

@pytest.fixture
def teacher(teacher_factory):
    return teacher_factory()

@pytest.fixture
def school_year(school_year_factory, teacher):
    return school_year_factory(teachers=[teacher])

@pytest.fixture
def student(student_factory, teacher):
    return student_factory(teacher)
