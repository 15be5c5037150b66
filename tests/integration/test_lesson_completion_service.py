from datetime import timedelta

import pytest

from app.core.constants import ApprovalStatusEnum, RecordStatusEnum
from app.core.exceptions import LessonNotAvailable, LessonNotFound, StudentNotFound
from app.crud.lesson_completion import lesson_completion as crud_lesson_completion
from app.models.lesson_completion import LessonCompletion
from app.services.lesson_completion import LessonCompletionService
from tests.helpers.fakes import NOW


@pytest.fixture
def completion_service(clock):
    return LessonCompletionService(clock)


def test_upcoming_lesson_cannot_be_completed(db_session, completion_service, teacher, student, school_year, lesson_factory):
    lesson = lesson_factory(teacher, school_year, 1, start_date=NOW + timedelta(hours=1))
    with pytest.raises(LessonNotAvailable):
        completion_service.set_completion(db_session, lesson.id, student.id, True)
    assert crud_lesson_completion.count_by_lesson(db_session, lesson_id=lesson.id) == 0

def test_completion_opens_with_the_schedule(db_session, clock, completion_service, teacher, student, school_year, lesson_factory):
    lesson = lesson_factory(teacher, school_year, 1, start_date=NOW + timedelta(hours=1))
    clock.advance(hours=2)
    completion = completion_service.set_completion(db_session, lesson.id, student.id, True)
    assert completion.lesson_id == lesson.id
    assert completion.student_id == student.id

def test_marking_completed_twice_keeps_one_record(db_session, completion_service, teacher, student, school_year, lesson_factory):
    lesson = lesson_factory(teacher, school_year, 1, start_date=NOW - timedelta(days=1))

    first = completion_service.set_completion(db_session, lesson.id, student.id, True)
    second = completion_service.set_completion(db_session, lesson.id, student.id, True)

    assert first.id == second.id
    assert crud_lesson_completion.count_by_lesson(db_session, lesson_id=lesson.id) == 1

def test_unmarking_twice_returns_nothing_both_times(db_session, completion_service, teacher, student, school_year, lesson_factory):
    lesson = lesson_factory(teacher, school_year, 1, start_date=NOW - timedelta(days=1))
    completion_service.set_completion(db_session, lesson.id, student.id, True)

    assert completion_service.set_completion(db_session, lesson.id, student.id, False) is None
    assert completion_service.set_completion(db_session, lesson.id, student.id, False) is None
    assert crud_lesson_completion.count_by_lesson(db_session, lesson_id=lesson.id) == 0

def test_concurrent_duplicate_insert_is_treated_as_already_completed(
    db_session, completion_service, teacher, student, school_year, lesson_factory, monkeypatch
):
    lesson = lesson_factory(teacher, school_year, 1, start_date=NOW - timedelta(days=1))
    # The competing request's row lands between our read and our insert
    db_session.add(LessonCompletion(lesson_id=lesson.id, student_id=student.id))
    db_session.commit()
    winner = crud_lesson_completion.get_by_lesson_and_student(db_session, lesson_id=lesson.id, student_id=student.id)

    original = crud_lesson_completion.get_by_lesson_and_student
    calls = []

    def stale_first_read(db, *, lesson_id, student_id):
        calls.append(lesson_id)
        if len(calls) == 1:
            return None
        return original(db, lesson_id=lesson_id, student_id=student_id)

    monkeypatch.setattr(crud_lesson_completion, "get_by_lesson_and_student", stale_first_read)

    completion = completion_service.set_completion(db_session, lesson.id, student.id, True)

    assert completion.id == winner.id
    assert len(calls) == 2
    assert crud_lesson_completion.count_by_lesson(db_session, lesson_id=lesson.id) == 1

def test_draft_lessons_cannot_be_completed(db_session, completion_service, teacher, student, school_year, lesson_factory):
    lesson = lesson_factory(teacher, school_year, 1, status=RecordStatusEnum.DRAFT, start_date=NOW - timedelta(days=1))
    with pytest.raises(LessonNotAvailable):
        completion_service.set_completion(db_session, lesson.id, student.id, True)

def test_unscheduled_lesson_completion_is_limited_to_the_teachers_students(
    db_session, completion_service, teacher, teacher_factory, student, student_factory, school_year, lesson_factory
):
    lesson = lesson_factory(teacher, school_year, 1)
    assert completion_service.set_completion(db_session, lesson.id, student.id, True) is not None

    stranger = student_factory(teacher_factory("Other Teacher"))
    with pytest.raises(LessonNotAvailable):
        completion_service.set_completion(db_session, lesson.id, stranger.id, True)

    pending = student_factory(teacher, approval_status=ApprovalStatusEnum.PENDING)
    with pytest.raises(LessonNotAvailable):
        completion_service.set_completion(db_session, lesson.id, pending.id, True)

def test_students_outside_the_audience_cannot_complete(
    db_session, completion_service, teacher, student, student_factory, school_year, lesson_factory
):
    classmate = student_factory(teacher)
    lesson = lesson_factory(teacher, school_year, 1, start_date=NOW - timedelta(days=1), students=[classmate])
    with pytest.raises(LessonNotAvailable):
        completion_service.set_completion(db_session, lesson.id, student.id, True)
    assert completion_service.set_completion(db_session, lesson.id, classmate.id, True) is not None

def test_unknown_lesson_or_student(db_session, completion_service, teacher, student, school_year, lesson_factory):
    lesson = lesson_factory(teacher, school_year, 1, start_date=NOW - timedelta(days=1))
    with pytest.raises(LessonNotFound):
        completion_service.set_completion(db_session, 9999, student.id, True)
    with pytest.raises(StudentNotFound):
        completion_service.set_completion(db_session, lesson.id, 9999, True)

def test_list_for_student_narrows_to_requested_lessons(db_session, completion_service, teacher, student, school_year, lesson_factory):
    first = lesson_factory(teacher, school_year, 1, start_date=NOW - timedelta(days=2))
    second = lesson_factory(teacher, school_year, 2, start_date=NOW - timedelta(days=1))
    completion_service.set_completion(db_session, first.id, student.id, True)
    completion_service.set_completion(db_session, second.id, student.id, True)

    assert {c.lesson_id for c in completion_service.list_for_student(db_session, student.id)} == {first.id, second.id}
    assert [c.lesson_id for c in completion_service.list_for_student(db_session, student.id, lesson_ids=[second.id])] == [second.id]
    assert completion_service.list_for_student(db_session, student.id, lesson_ids=[]) == []
