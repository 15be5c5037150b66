from datetime import datetime
from sqlalchemy.orm import Session, selectinload
from typing import Iterable, List, Optional

from app.crud.base import CRUDBase
from app.core.constants import RecordStatusEnum
from app.models.lesson import Lesson
from app.models.lesson_schedule import LessonSchedule
from app.models.user import StudentAccount
from app.schemas.lesson_schedule import LessonScheduleCreate, LessonScheduleUpdate

class CRUDLessonSchedule(CRUDBase[LessonSchedule, LessonScheduleCreate, LessonScheduleUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(LessonSchedule).options(
            selectinload(LessonSchedule.students),
            selectinload(LessonSchedule.lesson).selectinload(Lesson.schedules),
        )

    def get(self, db: Session, id: int) -> Optional[LessonSchedule]:
        return self._query_with_relationships(db).filter(LessonSchedule.id == id).first()

    def get_by_id_and_teacher(self, db: Session, *, schedule_id: int, teacher_id: int) -> Optional[LessonSchedule]:
        return (
            self._query_with_relationships(db)
            .join(Lesson, LessonSchedule.lesson_id == Lesson.id)
            .filter(LessonSchedule.id == schedule_id, Lesson.teacher_id == teacher_id)
            .first()
        )

    def get_by_lesson(self, db: Session, *, lesson_id: int) -> List[LessonSchedule]:
        return (
            self._query_with_relationships(db)
            .filter(LessonSchedule.lesson_id == lesson_id)
            .order_by(LessonSchedule.start_date.asc(), LessonSchedule.id.asc())
            .all()
        )

    def get_by_date_range_and_teacher(
        self, db: Session, *, from_date: datetime, to_date: datetime, teacher_id: int
    ) -> List[LessonSchedule]:
        return (
            self._query_with_relationships(db)
            .join(Lesson, LessonSchedule.lesson_id == Lesson.id)
            .filter(
                LessonSchedule.start_date >= from_date,
                LessonSchedule.start_date <= to_date,
                Lesson.teacher_id == teacher_id,
                Lesson.status == RecordStatusEnum.PUBLISHED,
            )
            .order_by(LessonSchedule.start_date.asc(), LessonSchedule.id.asc())
            .all()
        )

    def create_for_lesson(
        self, db: Session, *, lesson_id: int, start_date: datetime, student_ids: Optional[Iterable[int]] = None, commit: bool = True
    ) -> LessonSchedule:
        db_obj = LessonSchedule(lesson_id=lesson_id, start_date=start_date)
        db_obj.students = self._load_students(db, student_ids)
        db.add(db_obj)
        db.flush()
        if commit:
            db.commit()
        db.refresh(db_obj)
        return db_obj

    def set_students(self, db: Session, *, db_obj: LessonSchedule, student_ids: Optional[Iterable[int]]) -> LessonSchedule:
        db_obj.students = self._load_students(db, student_ids)
        db.add(db_obj)
        return db_obj

    def _load_students(self, db: Session, student_ids: Optional[Iterable[int]]) -> List[StudentAccount]:
        ids = list(student_ids or [])
        if not ids:
            return []
        return db.query(StudentAccount).filter(StudentAccount.id.in_(ids)).all()

lesson_schedule = CRUDLessonSchedule(LessonSchedule)
