from datetime import timedelta

from app.core.constants import PastLessonPolicyEnum, RecordStatusEnum, VisibilityEnum
from app.utils.selection import (
    next_or_latest_schedule, pick_upcoming, select_student_lessons, split_latest, split_timeline,
)
from tests.helpers.fakes import NOW, fake_lesson, fake_schedule, fake_student


def _scheduled(id, start_date, order_number=None, **kwargs):
    return fake_lesson(id, order_number=order_number, schedules=[fake_schedule(id, start_date)], **kwargs)


def test_upcoming_pick_is_earliest_start_date():
    later = _scheduled(1, NOW + timedelta(days=2))
    sooner = _scheduled(2, NOW + timedelta(days=1))
    assert pick_upcoming([later, sooner]) is sooner
    assert pick_upcoming([]) is None

def test_upcoming_pick_breaks_ties_by_lesson_id():
    start = NOW + timedelta(days=1)
    lessons = [_scheduled(9, start), _scheduled(4, start), _scheduled(6, start)]
    picks = {pick_upcoming(order).id for order in (lessons, lessons[::-1], sorted(lessons, key=lambda lesson: lesson.order_number))}
    assert picks == {4}

def test_latest_is_highest_order_number():
    lessons = [fake_lesson(1, order_number=1), fake_lesson(2, order_number=3), fake_lesson(3, order_number=2)]
    latest, previous = split_latest(lessons)
    assert latest.id == 2
    assert [lesson.id for lesson in previous] == [3, 1]
    assert split_latest([]) == (None, [])

def test_student_selection_surfaces_one_upcoming_and_splits_open_lessons():
    student = fake_student(1)
    lessons = [
        _scheduled(1, NOW - timedelta(days=14), order_number=1),
        _scheduled(2, NOW - timedelta(days=7), order_number=2),
        _scheduled(3, NOW + timedelta(days=7), order_number=3),
        _scheduled(4, NOW + timedelta(days=14), order_number=4),
        fake_lesson(5, order_number=5, status=RecordStatusEnum.DRAFT, schedules=[fake_schedule(5, NOW - timedelta(days=1))]),
        fake_lesson(6, order_number=6),
    ]

    selection = select_student_lessons(lessons, student, NOW)

    assert selection.upcoming.id == 3
    assert selection.upcoming_visibility == VisibilityEnum.PREVIEW
    assert selection.latest.id == 2
    assert [lesson.id for lesson in selection.previous] == [1]

def test_student_selection_with_nothing_visible():
    selection = select_student_lessons([fake_lesson(1)], fake_student(1), NOW)
    assert selection.upcoming is None
    assert selection.latest is None
    assert selection.previous == []

def test_carry_over_policy_keeps_unfinished_open_lesson_upcoming():
    student = fake_student(1)
    lessons = [
        _scheduled(1, NOW - timedelta(days=14), order_number=1),
        _scheduled(2, NOW - timedelta(days=7), order_number=2),
        _scheduled(3, NOW + timedelta(days=7), order_number=3),
    ]

    selection = select_student_lessons(
        lessons, student, NOW, completed_lesson_ids={1}, policy=PastLessonPolicyEnum.CARRY_OVER
    )
    assert selection.upcoming.id == 2
    assert selection.upcoming_visibility == VisibilityEnum.FULL
    assert selection.latest.id == 1
    assert selection.previous == []

    selection = select_student_lessons(
        lessons, student, NOW, completed_lesson_ids={1, 2}, policy=PastLessonPolicyEnum.CARRY_OVER
    )
    assert selection.upcoming.id == 3
    assert selection.upcoming_visibility == VisibilityEnum.PREVIEW
    assert selection.latest.id == 2

def test_next_or_latest_schedule_keeps_earliest_assigned():
    student = fake_student(1)
    schedules = [
        fake_schedule(3, NOW + timedelta(days=3)),
        fake_schedule(2, NOW + timedelta(days=1), student_ids=[99]),
        fake_schedule(1, NOW + timedelta(days=2)),
    ]
    selection = next_or_latest_schedule(schedules, student, teacher_id=1, as_of=NOW)
    assert selection.schedule.id == 1
    assert selection.is_upcoming

    selection = next_or_latest_schedule(schedules, student, teacher_id=1, as_of=NOW + timedelta(days=5))
    assert not selection.is_upcoming

    assert next_or_latest_schedule(schedules, fake_student(2, teacher_id=7), teacher_id=1, as_of=NOW) is None

def test_timeline_keeps_past_schedules_and_only_the_next_upcoming():
    schedules = [
        fake_schedule(4, NOW + timedelta(days=14)),
        fake_schedule(1, NOW - timedelta(days=14)),
        fake_schedule(3, NOW + timedelta(days=7)),
        fake_schedule(2, NOW),
    ]
    assert [schedule.id for schedule in split_timeline(schedules, NOW)] == [1, 2, 3]
    assert [schedule.id for schedule in split_timeline(schedules[:2], NOW)] == [1, 4]
    assert split_timeline([], NOW) == []
