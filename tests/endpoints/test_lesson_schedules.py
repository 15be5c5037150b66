from datetime import timedelta

from fastapi.testclient import TestClient

from app.core.constants import RecordStatusEnum
from app.models.lesson_completion import LessonCompletion
from tests.helpers.asserts import api_call, assert_error
from tests.helpers.fakes import NOW


def test_schedule_lifecycle(client: TestClient, db_session, teacher, student, school_year, lesson_factory):
    lesson = lesson_factory(teacher, school_year, 1)
    path = f"/teachers/{teacher.id}/lesson-schedules"

    response = api_call(client, "POST", path, json={"lesson_id": lesson.id, "start_date": (NOW - timedelta(hours=1)).isoformat()})
    assert response.status_code == 201
    schedule = response.json()["data"]
    assert schedule["student_ids"] == []

    assert_error(
        client.post(path, json={"lesson_id": lesson.id, "start_date": NOW.isoformat()}), 409, "DUPLICATE_SCHEDULE"
    )

    db_session.add(LessonCompletion(lesson_id=lesson.id, student_id=student.id))
    db_session.commit()

    assert_error(
        client.patch(f"{path}/{schedule['id']}", json={"start_date": (NOW + timedelta(days=1)).isoformat()}),
        412, "SCHEDULE_FROZEN",
    )
    assert_error(client.delete(f"{path}/{schedule['id']}"), 412, "HAS_COMPLETIONS")
    assert_error(client.delete(f"{path}/9999"), 404, "SCHEDULE_NOT_FOUND")

def test_scheduling_rejections(client: TestClient, teacher, school_year, lesson_factory):
    draft = lesson_factory(teacher, school_year, 1, status=RecordStatusEnum.DRAFT)
    path = f"/teachers/{teacher.id}/lesson-schedules"
    assert_error(client.post(path, json={"lesson_id": draft.id, "start_date": NOW.isoformat()}), 400, "LESSON_NOT_PUBLISHED")

    published = lesson_factory(teacher, school_year, 2)
    assert_error(
        client.post(path, json={"lesson_id": published.id, "start_date": NOW.isoformat(), "student_ids": [7, 9]}),
        400, "SPECIFIC_STUDENTS_UNSUPPORTED",
    )

def test_calendars(client: TestClient, teacher, student, school_year, lesson_factory):
    lesson_factory(teacher, school_year, 1, start_date=NOW - timedelta(days=3))
    lesson_factory(teacher, school_year, 2, start_date=NOW + timedelta(days=3))
    lesson_factory(teacher, school_year, 3, start_date=NOW + timedelta(days=6))
    window = {"from_date": (NOW - timedelta(days=10)).isoformat(), "to_date": (NOW + timedelta(days=10)).isoformat()}

    teacher_calendar = api_call(client, "GET", f"/teachers/{teacher.id}/lesson-schedules", params=window).json()["data"]
    assert [entry["lesson"]["order_number"] for entry in teacher_calendar] == [1, 2, 3]

    student_calendar = api_call(client, "GET", f"/students/{student.id}/lesson-schedules", params=window).json()["data"]
    assert [(entry["lesson"]["order_number"], entry["is_upcoming"]) for entry in student_calendar] == [(1, False), (2, True)]

    reversed_window = {"from_date": window["to_date"], "to_date": window["from_date"]}
    assert_error(client.get(f"/students/{student.id}/lesson-schedules", params=reversed_window), 400, "INVALID_REQUEST")
