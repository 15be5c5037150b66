import logging
from typing import List, Optional, Union
from sqlalchemy.orm import Session

from app.core.clock import Clock, SystemClock
from app.core.config import settings
from app.core.constants import PastLessonPolicyEnum, VisibilityEnum
from app.core.exceptions import LessonNotFound, StudentNotFound
from app.crud.lesson import lesson as crud_lesson
from app.crud.lesson_completion import lesson_completion as crud_lesson_completion
from app.crud.user import student as crud_student
from app.models.user import StudentAccount
from app.schemas.lesson import LessonPreview, StudentLesson, StudentLessonFeed, StudentLessonProgress
from app.services.lesson import LessonService
from app.services.lesson_completion import LessonCompletionService
from app.services.school_year import SchoolYearService
from app.utils.availability import AvailabilityEngine, shape_for_student
from app.utils.selection import pick_upcoming, select_student_lessons

logger = logging.getLogger(__name__)


class StudentLessonService:
    def __init__(self, clock: Optional[Clock] = None, policy: Optional[PastLessonPolicyEnum] = None):
        self.clock = clock or SystemClock()
        self.policy = policy or settings.PAST_LESSON_UPCOMING_POLICY
        self.school_year_service = SchoolYearService(self.clock)
        self.lesson_service = LessonService(self.clock)
        self.completion_service = LessonCompletionService(self.clock)

    def _get_student(self, db: Session, student_id: int) -> StudentAccount:
        student = crud_student.get(db, id=student_id)
        if not student:
            raise StudentNotFound()
        return student

    def get_feed(self, db: Session, student_id: int, q: Optional[str] = None, school_year_id: Optional[int] = None) -> StudentLessonFeed:
        student = self._get_student(db, student_id)
        school_year = self.school_year_service.resolve(db, school_year_id)
        now = self.clock.now()

        lessons = crud_lesson.get_published_for_student(
            db, student=student, school_year_id=school_year.id, title_contains=q
        )
        completions = {
            completion.lesson_id: completion
            for completion in self.completion_service.list_for_student(
                db, student.id, lesson_ids=[lesson.id for lesson in lessons]
            )
        }

        selection = select_student_lessons(
            lessons, student, now, completed_lesson_ids=set(completions), policy=self.policy
        )

        def shape(lesson, visibility=VisibilityEnum.FULL):
            return shape_for_student(lesson, visibility, now, completions.get(lesson.id))

        return StudentLessonFeed(
            upcoming_lesson=shape(selection.upcoming, selection.upcoming_visibility) if selection.upcoming else None,
            latest_lesson=shape(selection.latest) if selection.latest else None,
            previous_lessons=[shape(lesson) for lesson in selection.previous],
        )

    def get_by_slug(
        self, db: Session, student_id: int, slug: str, school_year_id: Optional[int] = None
    ) -> Union[StudentLesson, LessonPreview]:
        student = self._get_student(db, student_id)
        school_year = self.school_year_service.resolve(db, school_year_id)
        now = self.clock.now()

        lesson = crud_lesson.get_by_slug(db, slug=slug)
        if not lesson or lesson.school_year_id != school_year.id:
            raise LessonNotFound()

        visibility = AvailabilityEngine.visible_to(lesson, student, now)
        if visibility == VisibilityEnum.HIDDEN:
            raise LessonNotFound()

        if visibility == VisibilityEnum.PREVIEW:
            # Only the nearest upcoming lesson may be previewed
            candidates = [
                candidate
                for candidate in crud_lesson.get_published_for_student(db, student=student, school_year_id=school_year.id)
                if AvailabilityEngine.visible_to(candidate, student, now) == VisibilityEnum.PREVIEW
            ]
            upcoming = pick_upcoming(candidates)
            if upcoming is None or upcoming.id != lesson.id:
                logger.info(f"Student {student.id} asked for lesson {lesson.id} before it is next in line")
                raise LessonNotFound()
            return shape_for_student(lesson, visibility, now)

        completion = crud_lesson_completion.get_by_lesson_and_student(db, lesson_id=lesson.id, student_id=student.id)
        return shape_for_student(lesson, visibility, now, completion)

    def get_progress(self, db: Session, student_id: int) -> List[StudentLessonProgress]:
        """The student's own view of their teacher's lessons that already opened."""
        student = self._get_student(db, student_id)
        if student.teacher_id is None:
            return []
        return self.lesson_service.get_student_progress(db, student.teacher_id, student.id, as_student=True)
