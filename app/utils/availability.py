from datetime import datetime

from app.core.clock import to_utc
from app.core.constants import PREVIEW_LESSON_FIELDS, RecordStatusEnum, ScheduleStatusEnum, VisibilityEnum
from app.schemas.lesson import LessonPreview, StudentLesson
from app.schemas.lesson_completion import LessonCompletion
from app.schemas.lesson_schedule import StudentLessonSchedule
from app.utils.audience import AudienceResolver


class AvailabilityEngine:
    """Time and audience rules deciding what a student may see of a lesson.

    Every student-facing read (feed, detail, calendar, completion toggle and
    the teacher's per-student progress view) goes through `visible_to`, so
    the views cannot disagree about a lesson.
    """

    @staticmethod
    def status(schedule, as_of: datetime) -> ScheduleStatusEnum:
        if to_utc(schedule.start_date) <= to_utc(as_of):
            return ScheduleStatusEnum.OPEN
        return ScheduleStatusEnum.UPCOMING

    @staticmethod
    def is_open(schedule, as_of: datetime) -> bool:
        return AvailabilityEngine.status(schedule, as_of) == ScheduleStatusEnum.OPEN

    @staticmethod
    def is_upcoming(schedule, as_of: datetime) -> bool:
        return AvailabilityEngine.status(schedule, as_of) == ScheduleStatusEnum.UPCOMING

    @staticmethod
    def visible_to(lesson, student, as_of: datetime) -> VisibilityEnum:
        if lesson.status != RecordStatusEnum.PUBLISHED:
            return VisibilityEnum.HIDDEN

        schedule = lesson.schedule
        if schedule is None:
            return VisibilityEnum.HIDDEN

        if not AudienceResolver.is_assigned_to(schedule, student, lesson.teacher_id):
            return VisibilityEnum.HIDDEN

        if AvailabilityEngine.is_upcoming(schedule, as_of):
            return VisibilityEnum.PREVIEW
        return VisibilityEnum.FULL

    @staticmethod
    def can_complete(lesson, student, as_of: datetime) -> bool:
        """A lesson may be marked done once published and, if scheduled, opened for the student."""
        if lesson.status != RecordStatusEnum.PUBLISHED:
            return False

        schedule = lesson.schedule
        if schedule is None:
            return AudienceResolver.belongs_to_teacher(student, lesson.teacher_id)

        if not AudienceResolver.is_assigned_to(schedule, student, lesson.teacher_id):
            return False
        return AvailabilityEngine.is_open(schedule, as_of)


def shape_for_student(lesson, visibility: VisibilityEnum, as_of: datetime, completion=None):
    """Student-facing representation of `lesson` for a visibility tier.

    Preview never carries the video URL or description; hidden lessons have
    no representation at all.
    """
    if visibility == VisibilityEnum.HIDDEN:
        return None

    schedule = lesson.schedule
    fields = {name: getattr(lesson, name) for name in PREVIEW_LESSON_FIELDS}
    fields["schedule"] = StudentLessonSchedule(
        id=schedule.id,
        start_date=schedule.start_date,
        is_upcoming=AvailabilityEngine.is_upcoming(schedule, as_of),
    ) if schedule is not None else None

    if visibility == VisibilityEnum.PREVIEW:
        return LessonPreview(visibility=visibility, **fields)

    return StudentLesson(
        visibility=visibility,
        video_url=lesson.video_url,
        description=lesson.description,
        completion=LessonCompletion.model_validate(completion) if completion is not None else None,
        **fields,
    )
