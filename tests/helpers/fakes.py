from datetime import datetime
from types import SimpleNamespace

from app.core.clock import UTC
from app.core.constants import RecordStatusEnum

# Monday 2024-06-10 20:00 in Manila
NOW = datetime(2024, 6, 10, 12, 0, tzinfo=UTC)


def fake_student(id, teacher_id=1, is_active=True):
    return SimpleNamespace(id=id, teacher_id=teacher_id, is_active=is_active)

def fake_schedule(id, start_date, student_ids=()):
    return SimpleNamespace(id=id, start_date=start_date, students=[SimpleNamespace(id=i) for i in student_ids])

def fake_lesson(id, order_number=None, status=RecordStatusEnum.PUBLISHED, teacher_id=1, schedules=(), title=None):
    schedules = list(schedules)
    title = title or f"Lesson {id}"
    return SimpleNamespace(
        id=id,
        status=status,
        order_number=order_number if order_number is not None else id,
        title=title,
        slug=f"{id}-lesson",
        video_url=f"https://videos.test/{id}",
        duration_seconds=300,
        description="Full description",
        excerpt="Short",
        created_at=None,
        updated_at=None,
        teacher_id=teacher_id,
        schedules=schedules,
        schedule=schedules[0] if schedules else None,
    )
