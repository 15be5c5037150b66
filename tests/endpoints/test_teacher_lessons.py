from datetime import datetime, timedelta

from fastapi.testclient import TestClient

from app.core.constants import RecordStatusEnum
from app.models.lesson_completion import LessonCompletion
from tests.helpers.asserts import api_call, assert_error
from tests.helpers.fakes import NOW


def _payload(order_number, title, **kwargs):
    data = {"order_number": order_number, "title": title, "video_url": f"https://videos.test/{order_number}"}
    data.update(kwargs)
    return data


def test_create_and_fetch_lesson(client: TestClient, teacher, school_year):
    response = api_call(
        client, "POST", f"/teachers/{teacher.id}/lessons",
        json=_payload(1, "Plate Tectonics", status="published", start_date=(NOW + timedelta(days=1)).isoformat()),
    )
    assert response.status_code == 201
    assert response.headers["X-Request-ID"]
    data = response.json()["data"]
    assert data["slug"] == "1-plate-tectonics"
    assert len(data["schedules"]) == 1

    fetched = api_call(client, "GET", f"/teachers/{teacher.id}/lessons/1-plate-tectonics").json()["data"]
    assert fetched["id"] == data["id"]

def test_create_rejections_use_the_error_envelope(client: TestClient, teacher, school_year):
    api_call(client, "POST", f"/teachers/{teacher.id}/lessons", json=_payload(1, "Plate Tectonics"))

    body = assert_error(
        client.post(f"/teachers/{teacher.id}/lessons", json=_payload(1, "Volcanoes")), 409, "DUPLICATE_ORDER_NUMBER"
    )
    assert body["request_id"]
    assert body["path"] == f"/teachers/{teacher.id}/lessons"
    assert datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00")).utcoffset() == timedelta(0)

    assert_error(
        client.post(f"/teachers/{teacher.id}/lessons", json=_payload(2, "Volcanoes", start_date=NOW.isoformat(), student_ids=[3])),
        400, "SPECIFIC_STUDENTS_UNSUPPORTED",
    )
    assert_error(client.post(f"/teachers/{teacher.id}/lessons", json={"order_number": 3}), 422, "VALIDATION_ERROR")
    assert_error(
        client.post(f"/teachers/{teacher.id}/lessons", json=_payload(3, "Earthquakes", video_url="ftp://videos.test/3")),
        422, "VALIDATION_ERROR",
    )

def test_list_lessons_paginates_and_validates_sort(client: TestClient, teacher, school_year, lesson_factory):
    for order_number in range(1, 4):
        lesson_factory(teacher, school_year, order_number)

    page = api_call(
        client, "GET", f"/teachers/{teacher.id}/lessons", params={"sort": "order_number,desc", "limit": 2}
    ).json()["data"]
    assert [item["order_number"] for item in page["items"]] == [3, 2]
    assert page["total"] == 3
    assert page["has_next"] is True

    assert_error(client.get(f"/teachers/{teacher.id}/lessons", params={"sort": "video_url"}), 400, "INVALID_REQUEST")
    assert_error(client.get(f"/teachers/{teacher.id}/lessons", params={"status": "archived"}), 400, "INVALID_REQUEST")

def test_snippets_route_is_not_taken_for_a_slug(client: TestClient, teacher, school_year, lesson_factory):
    lesson_factory(teacher, school_year, 1, status=RecordStatusEnum.DRAFT)
    data = api_call(client, "GET", f"/teachers/{teacher.id}/lessons/snippets").json()["data"]
    assert [item["order_number"] for item in data] == [1]

def test_update_and_delete_lesson(client: TestClient, db_session, teacher, student, school_year, lesson_factory):
    lesson = lesson_factory(teacher, school_year, 1, title="Plate Tectonics", start_date=NOW - timedelta(days=1))

    data = api_call(client, "PATCH", f"/teachers/{teacher.id}/lessons/{lesson.slug}", json={"title": "Continental Drift"}).json()["data"]
    assert data["slug"] == "1-continental-drift"

    db_session.add(LessonCompletion(lesson_id=lesson.id, student_id=student.id))
    db_session.commit()

    assert_error(
        client.patch(f"/teachers/{teacher.id}/lessons/1-continental-drift", json={"status": "draft"}), 412, "LESSON_FROZEN"
    )
    assert_error(client.delete(f"/teachers/{teacher.id}/lessons/1-continental-drift"), 412, "HAS_COMPLETIONS")
    assert_error(client.delete(f"/teachers/{teacher.id}/lessons/missing"), 404, "LESSON_NOT_FOUND")

    other = lesson_factory(teacher, school_year, 2)
    assert api_call(client, "DELETE", f"/teachers/{teacher.id}/lessons/{other.slug}").json()["data"] is True

def test_teacher_sees_student_progress_with_upcoming_tag(client: TestClient, teacher, student, school_year, lesson_factory):
    lesson_factory(teacher, school_year, 1, start_date=NOW - timedelta(days=1))
    lesson_factory(teacher, school_year, 2, start_date=NOW + timedelta(days=1))

    data = api_call(client, "GET", f"/teachers/{teacher.id}/students/{student.id}/lessons").json()["data"]
    assert [(item["order_number"], item["schedule"]["is_upcoming"]) for item in data] == [(1, False), (2, True)]

    assert_error(client.get(f"/teachers/{teacher.id}/students/9999/lessons"), 404, "STUDENT_NOT_FOUND")
