from sqlalchemy.orm import Session
from typing import List, Optional

from app.crud.base import CRUDBase
from app.models.lesson import Lesson  # registers the lesson mappers
from app.models.lesson_completion import LessonCompletion
from app.schemas.lesson_completion import LessonCompletion as LessonCompletionSchema

class CRUDLessonCompletion(CRUDBase[LessonCompletion, LessonCompletionSchema, LessonCompletionSchema]):

    def get_by_lesson_and_student(self, db: Session, *, lesson_id: int, student_id: int) -> Optional[LessonCompletion]:
        return (
            db.query(LessonCompletion)
            .filter(LessonCompletion.lesson_id == lesson_id, LessonCompletion.student_id == student_id)
            .first()
        )

    def get_by_student(self, db: Session, *, student_id: int, lesson_ids: Optional[List[int]] = None) -> List[LessonCompletion]:
        query = db.query(LessonCompletion).filter(LessonCompletion.student_id == student_id)
        if lesson_ids is not None:
            query = query.filter(LessonCompletion.lesson_id.in_(lesson_ids))
        return (
            query
            .order_by(LessonCompletion.created_at.asc(), LessonCompletion.id.asc())
            .all()
        )

    def count_by_lesson(self, db: Session, *, lesson_id: int) -> int:
        return self.count(db, LessonCompletion.lesson_id == lesson_id)

    def delete_by_lesson_and_student(self, db: Session, *, lesson_id: int, student_id: int, commit: bool = True) -> int:
        affected = (
            db.query(LessonCompletion)
            .filter(LessonCompletion.lesson_id == lesson_id, LessonCompletion.student_id == student_id)
            .delete(synchronize_session="fetch")
        )
        if commit:
            db.commit()
        return affected

lesson_completion = CRUDLessonCompletion(LessonCompletion)
