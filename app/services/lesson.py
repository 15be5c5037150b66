import logging
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from app.core.clock import Clock, SystemClock
from app.core.config import settings
from app.core.constants import LessonEventEnum, RecordStatusEnum
from app.core.exceptions import (
    LessonNotFound, StudentNotFound, DuplicateOrderNumber, DuplicateSlug, LessonFrozen, HasCompletions,
)
from app.crud.lesson import lesson as crud_lesson
from app.crud.lesson_completion import lesson_completion as crud_lesson_completion
from app.crud.lesson_query import LessonQuery
from app.crud.user import student as crud_student
from app.models.lesson import Lesson
from app.schemas.lesson import LessonCreate, LessonUpdate, StudentLessonProgress
from app.schemas.lesson_completion import LessonCompletion as LessonCompletionSchema
from app.schemas.lesson_schedule import StudentLessonSchedule
from app.services.lesson_schedule import LessonScheduleService
from app.services.school_year import SchoolYearService
from app.utils.events import event_bus
from app.utils.selection import next_or_latest_schedule
from app.utils.slug import derive_slug

logger = logging.getLogger(__name__)

# Columns a PATCH may not clear
_REQUIRED_FIELDS = ("status", "order_number", "title", "video_url")


class LessonService:
    """Teacher-side lesson management."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()
        self.schedule_service = LessonScheduleService(self.clock)
        self.school_year_service = SchoolYearService(self.clock)

    def _emit(self, event: LessonEventEnum, lesson: Lesson):
        event_bus.emit(event.value, {
            "lesson_id": lesson.id,
            "teacher_id": lesson.teacher_id,
            "slug": lesson.slug,
            "status": lesson.status.value if lesson.status else None,
        })

    def list_lessons(self, db: Session, teacher_id: int, lesson_query: LessonQuery) -> Tuple[List[Lesson], int]:
        return crud_lesson.get_by_teacher(db, teacher_id=teacher_id, lesson_query=lesson_query)

    def get_snippets(self, db: Session, teacher_id: int, take: Optional[int] = None) -> List[Lesson]:
        """Lessons that need the teacher's attention first: unscheduled, then drafts, then scheduled."""
        take = take if take is not None else settings.LESSON_SNIPPET_TAKE
        lessons = crud_lesson.get_all_by_teacher(db, teacher_id=teacher_id)

        unscheduled = [lesson for lesson in lessons if lesson.status == RecordStatusEnum.PUBLISHED and not lesson.schedules]
        drafts = [lesson for lesson in lessons if lesson.status == RecordStatusEnum.DRAFT]
        scheduled = [lesson for lesson in lessons if lesson.status == RecordStatusEnum.PUBLISHED and lesson.schedules]

        return (unscheduled + drafts + scheduled)[:take]

    def get_by_slug(self, db: Session, teacher_id: int, slug: str, statuses: Optional[List[RecordStatusEnum]] = None) -> Lesson:
        lesson = crud_lesson.get_by_slug_and_teacher(db, slug=slug, teacher_id=teacher_id, statuses=statuses)
        if not lesson:
            raise LessonNotFound()
        return lesson

    def _ensure_unique_slug(self, db: Session, slug: str, exclude_lesson_id: Optional[int] = None):
        if crud_lesson.slug_taken(db, slug=slug, exclude_lesson_id=exclude_lesson_id):
            raise DuplicateSlug()

    def create(self, db: Session, lesson_in: LessonCreate, teacher_id: int) -> Lesson:
        school_year = self.school_year_service.resolve_for_teacher(db, teacher_id, lesson_in.school_year_id)

        if crud_lesson.count_by_order_number(
            db, teacher_id=teacher_id, school_year_id=school_year.id, order_number=lesson_in.order_number
        ):
            raise DuplicateOrderNumber()

        if lesson_in.start_date is not None:
            error = self.schedule_service.validate_create(None, lesson_in.student_ids)
            if error:
                raise error

        slug = derive_slug(lesson_in.order_number, lesson_in.title)
        self._ensure_unique_slug(db, slug)

        lesson_data = lesson_in.model_dump(exclude={"start_date", "student_ids", "school_year_id"})
        lesson_data.update(slug=slug, teacher_id=teacher_id, school_year_id=school_year.id)
        lesson = crud_lesson.create(db, obj_in=lesson_data, commit=False)

        if lesson_in.start_date is not None and lesson.status == RecordStatusEnum.PUBLISHED:
            self.schedule_service.upsert_for_lesson(db, lesson, lesson_in.start_date)
        else:
            db.commit()

        logger.info(f"Lesson {lesson.id} ({slug}) created by teacher {teacher_id}")
        lesson = crud_lesson.get(db, id=lesson.id)
        self._emit(LessonEventEnum.LESSON_CREATED, lesson)
        return lesson

    def update(self, db: Session, slug: str, lesson_in: LessonUpdate, teacher_id: int) -> Lesson:
        lesson = crud_lesson.get_by_slug_and_teacher(db, slug=slug, teacher_id=teacher_id)
        if not lesson:
            raise LessonNotFound()

        update_data = lesson_in.model_dump(exclude_unset=True, exclude={"start_date", "student_ids"})
        for field in _REQUIRED_FIELDS:
            if field in update_data and update_data[field] is None:
                del update_data[field]

        self._check_frozen_fields(db, lesson, update_data)

        order_number = update_data.get("order_number", lesson.order_number)
        if "order_number" in update_data and crud_lesson.count_by_order_number(
            db,
            teacher_id=teacher_id,
            school_year_id=lesson.school_year_id,
            order_number=order_number,
            exclude_lesson_id=lesson.id,
        ):
            raise DuplicateOrderNumber()

        if lesson_in.start_date is not None:
            error = self.schedule_service.validate_create(None, lesson_in.student_ids)
            if error:
                raise error
            if update_data.get("status", lesson.status) == RecordStatusEnum.PUBLISHED:
                self.schedule_service.ensure_movable(db, lesson.schedule, lesson_in.start_date)

        new_slug = derive_slug(order_number, update_data.get("title", lesson.title))
        self._ensure_unique_slug(db, new_slug, exclude_lesson_id=lesson.id)
        update_data["slug"] = new_slug

        lesson = crud_lesson.update(db, db_obj=lesson, obj_in=update_data, commit=False)

        if lesson_in.start_date is not None and lesson.status == RecordStatusEnum.PUBLISHED:
            self.schedule_service.upsert_for_lesson(db, lesson, lesson_in.start_date)
        else:
            db.commit()

        logger.info(f"Lesson {lesson.id} updated by teacher {teacher_id}")
        lesson = crud_lesson.get(db, id=lesson.id)
        self._emit(LessonEventEnum.LESSON_UPDATED, lesson)
        return lesson

    def _check_frozen_fields(self, db: Session, lesson: Lesson, update_data: dict):
        if not crud_lesson_completion.count_by_lesson(db, lesson_id=lesson.id):
            return

        unpublishing = (
            lesson.status == RecordStatusEnum.PUBLISHED
            and "status" in update_data
            and update_data["status"] != RecordStatusEnum.PUBLISHED
        )
        renumbering = "order_number" in update_data and update_data["order_number"] != lesson.order_number
        if unpublishing or renumbering:
            logger.warning(f"Refusing to unpublish or renumber lesson {lesson.id}: it has completions")
            raise LessonFrozen()

    def delete(self, db: Session, slug: str, teacher_id: int) -> bool:
        lesson = self.get_by_slug(db, teacher_id, slug)

        if crud_lesson_completion.count_by_lesson(db, lesson_id=lesson.id):
            raise HasCompletions("Cannot delete lesson.")

        self._emit(LessonEventEnum.LESSON_DELETED, lesson)
        crud_lesson.delete(db, id=lesson.id)
        logger.info(f"Lesson {lesson.id} ({slug}) deleted by teacher {teacher_id}")
        return True

    def get_student_progress(
        self, db: Session, teacher_id: int, student_id: int, as_student: bool = False
    ) -> List[StudentLessonProgress]:
        """Each published lesson of a teacher with the one schedule and completion that apply to a student.

        A student caller only sees lessons whose schedule already opened; a
        teacher also sees the upcoming ones, tagged `is_upcoming`.
        """
        student = crud_student.get(db, id=student_id)
        if not student:
            raise StudentNotFound()

        now = self.clock.now()
        progress = []
        for lesson in crud_lesson.get_published_by_teacher(db, teacher_id=teacher_id):
            selection = next_or_latest_schedule(lesson.schedules, student, lesson.teacher_id, now)
            if selection is None:
                continue
            if as_student and selection.is_upcoming:
                continue

            completion = next((c for c in lesson.completions if c.student_id == student.id), None)
            progress.append(StudentLessonProgress(
                id=lesson.id,
                status=lesson.status,
                order_number=lesson.order_number,
                title=lesson.title,
                slug=lesson.slug,
                duration_seconds=lesson.duration_seconds,
                excerpt=lesson.excerpt,
                schedule=StudentLessonSchedule(
                    id=selection.schedule.id,
                    start_date=selection.schedule.start_date,
                    is_upcoming=selection.is_upcoming,
                ),
                completion=LessonCompletionSchema.model_validate(completion) if completion else None,
            ))
        return progress
