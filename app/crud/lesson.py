from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload
from typing import Any, Iterable, List, Optional, Tuple

from app.crud.base import CRUDBase
from app.crud.lesson_query import (
    LessonQuery, LessonOrdering, TitleContains, StatusIn, SchoolYearEquals,
)
from app.core.constants import LessonSortEnum, RecordStatusEnum, SortOrderEnum
from app.models.lesson import Lesson
from app.models.lesson_schedule import LessonSchedule
from app.models.user import StudentAccount
from app.schemas.lesson import LessonCreate, LessonUpdate

class CRUDLesson(CRUDBase[Lesson, LessonCreate, LessonUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Lesson).options(
            selectinload(Lesson.schedules).selectinload(LessonSchedule.students),
        )

    def get(self, db: Session, id: Any) -> Optional[Lesson]:
        return self._query_with_relationships(db).filter(Lesson.id == id).first()

    def get_by_slug(self, db: Session, *, slug: str) -> Optional[Lesson]:
        return self._query_with_relationships(db).filter(Lesson.slug == slug).first()

    def get_by_slug_and_teacher(
        self, db: Session, *, slug: str, teacher_id: int, statuses: Optional[Iterable[RecordStatusEnum]] = None
    ) -> Optional[Lesson]:
        query = self._query_with_relationships(db).filter(Lesson.slug == slug, Lesson.teacher_id == teacher_id)
        statuses = list(statuses or [])
        if statuses:
            query = query.filter(Lesson.status.in_(statuses))
        return query.first()

    def get_by_id_and_teacher(self, db: Session, *, lesson_id: int, teacher_id: int) -> Optional[Lesson]:
        return (
            self._query_with_relationships(db)
            .filter(Lesson.id == lesson_id, Lesson.teacher_id == teacher_id)
            .first()
        )

    def count_by_order_number(
        self, db: Session, *, teacher_id: int, school_year_id: int, order_number: int, exclude_lesson_id: Optional[int] = None
    ) -> int:
        criteria = [
            Lesson.teacher_id == teacher_id,
            Lesson.school_year_id == school_year_id,
            Lesson.order_number == order_number,
        ]
        if exclude_lesson_id is not None:
            criteria.append(Lesson.id != exclude_lesson_id)
        return self.count(db, *criteria)

    def slug_taken(self, db: Session, *, slug: str, exclude_lesson_id: Optional[int] = None) -> bool:
        criteria = [Lesson.slug == slug]
        if exclude_lesson_id is not None:
            criteria.append(Lesson.id != exclude_lesson_id)
        return self.count(db, *criteria) > 0

    def _apply_filter(self, query, lesson_filter):
        if isinstance(lesson_filter, TitleContains):
            return query.filter(Lesson.title.ilike(f"%{lesson_filter.text}%"))
        if isinstance(lesson_filter, StatusIn):
            return query.filter(Lesson.status.in_(list(lesson_filter.statuses)))
        if isinstance(lesson_filter, SchoolYearEquals):
            return query.filter(Lesson.school_year_id == lesson_filter.school_year_id)
        raise TypeError(f"Unsupported lesson filter: {lesson_filter!r}")

    def _apply_ordering(self, query, ordering: LessonOrdering):
        direction = (lambda column: column.desc()) if ordering.order == SortOrderEnum.DESC else (lambda column: column.asc())

        if ordering.sort_by == LessonSortEnum.SCHEDULE_DATE:
            first_start = (
                select(func.min(LessonSchedule.start_date))
                .where(LessonSchedule.lesson_id == Lesson.id)
                .correlate(Lesson)
                .scalar_subquery()
            )
            # Unscheduled lessons always sort last
            return query.order_by(first_start.is_(None), direction(first_start), Lesson.id.asc())

        columns = {
            LessonSortEnum.ORDER_NUMBER: Lesson.order_number,
            LessonSortEnum.TITLE: Lesson.title,
            LessonSortEnum.CREATED_AT: Lesson.created_at,
        }
        return query.order_by(direction(columns[ordering.sort_by]), Lesson.id.asc())

    def get_by_teacher(self, db: Session, *, teacher_id: int, lesson_query: LessonQuery) -> Tuple[List[Lesson], int]:
        query = self._query_with_relationships(db).filter(Lesson.teacher_id == teacher_id)
        for lesson_filter in lesson_query.filters:
            query = self._apply_filter(query, lesson_filter)

        total = query.count()
        query = self._apply_ordering(query, lesson_query.ordering).offset(lesson_query.skip)
        if lesson_query.limit is not None:
            query = query.limit(lesson_query.limit)
        return query.all(), total

    def get_all_by_teacher(self, db: Session, *, teacher_id: int) -> List[Lesson]:
        return (
            self._query_with_relationships(db)
            .filter(Lesson.teacher_id == teacher_id)
            .order_by(Lesson.order_number.asc(), Lesson.id.asc())
            .all()
        )

    def get_published_for_student(
        self, db: Session, *, student: StudentAccount, school_year_id: Optional[int] = None, title_contains: Optional[str] = None
    ) -> List[Lesson]:
        """Published lessons that may concern `student`; audience and time rules are applied by the caller."""
        query = (
            self._query_with_relationships(db)
            .filter(Lesson.status == RecordStatusEnum.PUBLISHED)
            .filter(
                or_(
                    Lesson.teacher_id == student.teacher_id,
                    Lesson.schedules.any(LessonSchedule.students.any(StudentAccount.id == student.id)),
                )
            )
        )
        if school_year_id is not None:
            query = query.filter(Lesson.school_year_id == school_year_id)
        if title_contains and title_contains.strip():
            query = query.filter(Lesson.title.ilike(f"%{title_contains.strip()}%"))
        return query.order_by(Lesson.order_number.asc(), Lesson.id.asc()).all()

    def get_published_by_teacher(self, db: Session, *, teacher_id: int) -> List[Lesson]:
        return (
            self._query_with_relationships(db)
            .options(selectinload(Lesson.completions))
            .filter(Lesson.teacher_id == teacher_id, Lesson.status == RecordStatusEnum.PUBLISHED)
            .order_by(Lesson.order_number.asc(), Lesson.id.asc())
            .all()
        )

lesson = CRUDLesson(Lesson)
