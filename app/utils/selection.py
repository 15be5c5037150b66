"""Picking "the one lesson to look at" out of many candidates.

Orderings carry explicit tie-breaks on ids so repeated reads return the same
pick even when schedules share a start date.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Set

from app.core.clock import to_utc
from app.core.constants import PastLessonPolicyEnum, VisibilityEnum
from app.utils.audience import AudienceResolver
from app.utils.availability import AvailabilityEngine


@dataclass
class StudentLessonSelection:
    upcoming: Optional[object] = None
    upcoming_visibility: Optional[VisibilityEnum] = None
    latest: Optional[object] = None
    previous: List[object] = field(default_factory=list)


@dataclass
class ScheduleSelection:
    schedule: object
    is_upcoming: bool


def upcoming_sort_key(lesson):
    return (to_utc(lesson.schedule.start_date), lesson.id)


def latest_sort_key(lesson):
    return (-lesson.order_number, -lesson.id)


def schedule_sort_key(schedule):
    return (to_utc(schedule.start_date), schedule.id)


def pick_upcoming(lessons: Iterable) -> Optional[object]:
    candidates = list(lessons)
    if not candidates:
        return None
    return min(candidates, key=upcoming_sort_key)


def split_latest(lessons: Iterable):
    ordered = sorted(lessons, key=latest_sort_key)
    if not ordered:
        return None, []
    return ordered[0], ordered[1:]


def select_student_lessons(
    lessons: Sequence,
    student,
    as_of: datetime,
    completed_lesson_ids: Optional[Set[int]] = None,
    policy: PastLessonPolicyEnum = PastLessonPolicyEnum.PREVIOUS,
) -> StudentLessonSelection:
    previews = []
    opened = []
    for lesson in lessons:
        visibility = AvailabilityEngine.visible_to(lesson, student, as_of)
        if visibility == VisibilityEnum.PREVIEW:
            previews.append(lesson)
        elif visibility == VisibilityEnum.FULL:
            opened.append(lesson)

    selection = StudentLessonSelection()

    if policy == PastLessonPolicyEnum.CARRY_OVER:
        completed = completed_lesson_ids or set()
        pending = [lesson for lesson in opened if lesson.id not in completed]
        carried = pick_upcoming(pending)
        if carried is not None:
            selection.upcoming = carried
            selection.upcoming_visibility = VisibilityEnum.FULL
            opened = [lesson for lesson in opened if lesson.id != carried.id]

    if selection.upcoming is None:
        selection.upcoming = pick_upcoming(previews)
        if selection.upcoming is not None:
            selection.upcoming_visibility = VisibilityEnum.PREVIEW

    selection.latest, selection.previous = split_latest(opened)
    return selection


def next_or_latest_schedule(schedules: Iterable, student, teacher_id: int, as_of: datetime) -> Optional[ScheduleSelection]:
    """Earliest schedule of a lesson that applies to `student`, tagged when still in the future."""
    assigned = [
        schedule for schedule in schedules
        if AudienceResolver.is_assigned_to(schedule, student, teacher_id)
    ]
    if not assigned:
        return None
    schedule = min(assigned, key=schedule_sort_key)
    return ScheduleSelection(schedule=schedule, is_upcoming=AvailabilityEngine.is_upcoming(schedule, as_of))


def split_timeline(schedules: Iterable, as_of: datetime) -> List[object]:
    """All schedules that already started, followed by only the next upcoming one."""
    ordered = sorted(schedules, key=schedule_sort_key)
    started = [schedule for schedule in ordered if AvailabilityEngine.is_open(schedule, as_of)]
    upcoming = [schedule for schedule in ordered if AvailabilityEngine.is_upcoming(schedule, as_of)]
    if upcoming:
        return started + [upcoming[0]]
    return started
