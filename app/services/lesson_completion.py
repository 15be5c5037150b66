import logging
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.clock import Clock, SystemClock
from app.core.constants import LessonEventEnum
from app.core.exceptions import LessonNotFound, LessonNotAvailable, StudentNotFound
from app.crud.lesson import lesson as crud_lesson
from app.crud.lesson_completion import lesson_completion as crud_lesson_completion
from app.crud.user import student as crud_student
from app.models.lesson_completion import LessonCompletion
from app.utils.availability import AvailabilityEngine
from app.utils.events import event_bus

logger = logging.getLogger(__name__)


class LessonCompletionService:
    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()

    def set_completion(self, db: Session, lesson_id: int, student_id: int, is_completed: bool) -> Optional[LessonCompletion]:
        """Bring the student's completion of a lesson to the requested state.

        Repeating a request is a no-op that returns the current state, so retried
        client calls neither duplicate rows nor fail. Returns the completion
        record, or None when the lesson ends up not completed.
        """
        lesson = crud_lesson.get(db, id=lesson_id)
        if not lesson:
            raise LessonNotFound()

        student = crud_student.get(db, id=student_id)
        if not student:
            raise StudentNotFound()

        if not AvailabilityEngine.can_complete(lesson, student, self.clock.now()):
            logger.warning(f"Student {student_id} cannot toggle completion of lesson {lesson_id}: not available")
            raise LessonNotAvailable()

        existing = crud_lesson_completion.get_by_lesson_and_student(db, lesson_id=lesson.id, student_id=student.id)

        if is_completed and not existing:
            return self._create(db, lesson.id, student.id)

        if not is_completed and existing:
            crud_lesson_completion.delete_by_lesson_and_student(db, lesson_id=lesson.id, student_id=student.id)
            logger.info(f"Student {student.id} unmarked lesson {lesson.id} as completed")
            event_bus.emit(LessonEventEnum.COMPLETION_DELETED.value, {"lesson_id": lesson.id, "student_id": student.id})
            return None

        return existing

    def list_for_student(self, db: Session, student_id: int, lesson_ids: Optional[List[int]] = None) -> List[LessonCompletion]:
        return crud_lesson_completion.get_by_student(db, student_id=student_id, lesson_ids=lesson_ids)

    def _create(self, db: Session, lesson_id: int, student_id: int) -> LessonCompletion:
        try:
            completion = crud_lesson_completion.create(db, obj_in={"lesson_id": lesson_id, "student_id": student_id})
        except IntegrityError:
            # A concurrent identical request won the insert; its row is our answer
            db.rollback()
            completion = crud_lesson_completion.get_by_lesson_and_student(db, lesson_id=lesson_id, student_id=student_id)
            if completion is None:
                raise
            logger.info(f"Completion of lesson {lesson_id} by student {student_id} already recorded by a concurrent request")
            return completion

        logger.info(f"Student {student_id} completed lesson {lesson_id}")
        event_bus.emit(LessonEventEnum.COMPLETION_CREATED.value, {
            "lesson_completion_id": completion.id,
            "lesson_id": lesson_id,
            "student_id": student_id,
        })
        return completion

