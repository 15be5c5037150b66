import logging
from datetime import datetime
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session

from app.core.clock import Clock, SystemClock
from app.core.constants import LessonEventEnum, RecordStatusEnum
from app.core.exceptions import (
    LessonServiceError, LessonNotFound, LessonNotPublished, ScheduleNotFound, StudentNotFound,
    DuplicateSchedule, SpecificStudentsUnsupported, ScheduleFrozen, HasCompletions,
)
from app.crud.lesson import lesson as crud_lesson
from app.crud.lesson_schedule import lesson_schedule as crud_lesson_schedule
from app.crud.lesson_completion import lesson_completion as crud_lesson_completion
from app.crud.user import student as crud_student
from app.models.lesson import Lesson
from app.models.lesson_schedule import LessonSchedule
from app.schemas.lesson_schedule import (
    LessonScheduleCreate, LessonScheduleUpdate, StudentCalendarEntry, ScheduledLessonSnippet,
)
from app.utils.audience import AudienceResolver
from app.utils.availability import AvailabilityEngine
from app.utils.events import event_bus
from app.utils.selection import split_timeline

logger = logging.getLogger(__name__)


class LessonScheduleService:
    """Owns the one-schedule-per-lesson rule and the freeze that completions put on a schedule."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()

    def validate_create(self, lesson: Optional[Lesson], student_ids: Optional[Iterable[int]] = None) -> Optional[LessonServiceError]:
        """Return the rejection for scheduling `lesson`, or None when it may be scheduled.

        A lesson that already has a schedule is a duplicate whatever the
        audience. Otherwise per-student scheduling is not offered yet, so any
        explicit student list is refused rather than silently dropped.
        """
        if lesson is not None and lesson.schedules:
            return DuplicateSchedule()
        if student_ids:
            return SpecificStudentsUnsupported()
        return None

    def _has_completions(self, db: Session, lesson_id: int) -> bool:
        return crud_lesson_completion.count_by_lesson(db, lesson_id=lesson_id) > 0

    def _emit(self, event: LessonEventEnum, schedule: LessonSchedule):
        event_bus.emit(event.value, {
            "lesson_schedule_id": schedule.id,
            "lesson_id": schedule.lesson_id,
            "start_date": schedule.start_date.isoformat(),
        })

    def create(self, db: Session, schedule_in: LessonScheduleCreate, teacher_id: int) -> LessonSchedule:
        lesson = crud_lesson.get_by_id_and_teacher(db, lesson_id=schedule_in.lesson_id, teacher_id=teacher_id)
        if not lesson:
            raise LessonNotFound()
        if lesson.status != RecordStatusEnum.PUBLISHED:
            raise LessonNotPublished()

        error = self.validate_create(lesson, schedule_in.student_ids)
        if error:
            logger.warning(f"Schedule creation rejected for lesson {lesson.id}: {error.code}")
            raise error

        schedule = crud_lesson_schedule.create_for_lesson(
            db,
            lesson_id=lesson.id,
            start_date=self.clock.localize(schedule_in.start_date),
            student_ids=schedule_in.student_ids,
        )
        logger.info(f"Lesson schedule {schedule.id} created for lesson {lesson.id} at {schedule.start_date.isoformat()}")
        self._emit(LessonEventEnum.SCHEDULE_CREATED, schedule)
        return schedule

    def update(self, db: Session, schedule_id: int, schedule_in: LessonScheduleUpdate, teacher_id: int) -> LessonSchedule:
        schedule = crud_lesson_schedule.get_by_id_and_teacher(db, schedule_id=schedule_id, teacher_id=teacher_id)
        if not schedule:
            raise ScheduleNotFound()
        if schedule_in.student_ids:
            raise SpecificStudentsUnsupported()

        if schedule_in.start_date is not None:
            self._move_start_date(db, schedule, self.clock.localize(schedule_in.start_date))
        crud_lesson_schedule.set_students(db, db_obj=schedule, student_ids=None)

        db.commit()
        db.refresh(schedule)
        logger.info(f"Lesson schedule {schedule.id} updated to start at {schedule.start_date.isoformat()}")
        self._emit(LessonEventEnum.SCHEDULE_UPDATED, schedule)
        return schedule

    def ensure_movable(self, db: Session, schedule: Optional[LessonSchedule], start_date: datetime) -> bool:
        """Whether moving `schedule` to `start_date` changes it; ScheduleFrozen when completions forbid that."""
        if schedule is None or self.clock.localize(start_date) == schedule.start_date:
            return False
        if self._has_completions(db, schedule.lesson_id):
            logger.warning(f"Refusing to move schedule {schedule.id}: lesson {schedule.lesson_id} has completions")
            raise ScheduleFrozen()
        return True

    def _move_start_date(self, db: Session, schedule: LessonSchedule, start_date: datetime):
        if not self.ensure_movable(db, schedule, start_date):
            return
        schedule.start_date = start_date
        db.add(schedule)

    def delete(self, db: Session, schedule_id: int, teacher_id: int) -> bool:
        schedule = crud_lesson_schedule.get_by_id_and_teacher(db, schedule_id=schedule_id, teacher_id=teacher_id)
        if not schedule:
            raise ScheduleNotFound()
        if self._has_completions(db, schedule.lesson_id):
            raise HasCompletions("Cannot delete lesson schedule.")

        self._emit(LessonEventEnum.SCHEDULE_DELETED, schedule)
        crud_lesson_schedule.delete(db, id=schedule.id)
        logger.info(f"Lesson schedule {schedule_id} deleted")
        return True

    def upsert_for_lesson(
        self, db: Session, lesson: Lesson, start_date: datetime, student_ids: Optional[Iterable[int]] = None
    ) -> LessonSchedule:
        """Schedule `lesson` from the lesson write path, replacing the start date of its existing schedule."""
        if student_ids:
            raise SpecificStudentsUnsupported()

        start_date = self.clock.localize(start_date)
        existing = lesson.schedule
        if existing is None:
            schedule = crud_lesson_schedule.create_for_lesson(db, lesson_id=lesson.id, start_date=start_date)
            logger.info(f"Lesson schedule {schedule.id} created for lesson {lesson.id} at {schedule.start_date.isoformat()}")
            self._emit(LessonEventEnum.SCHEDULE_CREATED, schedule)
            return schedule

        self._move_start_date(db, existing, start_date)
        db.commit()
        db.refresh(existing)
        self._emit(LessonEventEnum.SCHEDULE_UPDATED, existing)
        return existing

    def list_for_teacher(self, db: Session, teacher_id: int, from_date: datetime, to_date: datetime) -> List[LessonSchedule]:
        return crud_lesson_schedule.get_by_date_range_and_teacher(
            db,
            from_date=self.clock.localize(from_date),
            to_date=self.clock.localize(to_date),
            teacher_id=teacher_id,
        )

    def list_for_student(self, db: Session, student_id: int, from_date: datetime, to_date: datetime) -> List[StudentCalendarEntry]:
        """Calendar of a student: every schedule that already started plus only the next upcoming one."""
        student = crud_student.get(db, id=student_id)
        if not student:
            raise StudentNotFound()
        if student.teacher_id is None:
            return []

        now = self.clock.now()
        schedules = [
            schedule
            for schedule in self.list_for_teacher(db, student.teacher_id, from_date, to_date)
            if AudienceResolver.is_assigned_to(schedule, student, schedule.lesson.teacher_id)
        ]

        return [
            StudentCalendarEntry(
                id=schedule.id,
                start_date=schedule.start_date,
                is_upcoming=AvailabilityEngine.is_upcoming(schedule, now),
                lesson=ScheduledLessonSnippet.model_validate(schedule.lesson),
            )
            for schedule in split_timeline(schedules, now)
        ]
