from datetime import datetime
from sqlalchemy.orm import Session
from typing import Optional

from app.crud.base import CRUDBase
from app.core.constants import RecordStatusEnum
from app.models.lesson import Lesson  # registers the lesson mappers used by SchoolYear.lessons
from app.models.school_year import SchoolYear, school_year_teachers_association

class CRUDSchoolYear(CRUDBase[SchoolYear, dict, dict]):

    def get_current(self, db: Session, *, now: datetime) -> Optional[SchoolYear]:
        published = db.query(SchoolYear).filter(SchoolYear.status == RecordStatusEnum.PUBLISHED)
        current = (
            published
            .filter(SchoolYear.start_date <= now, SchoolYear.end_date >= now)
            .order_by(SchoolYear.start_date.desc(), SchoolYear.id.desc())
            .first()
        )
        if current:
            return current
        return (
            published
            .filter(SchoolYear.start_date <= now)
            .order_by(SchoolYear.start_date.desc(), SchoolYear.id.desc())
            .first()
        )

    def is_teacher_enrolled(self, db: Session, *, school_year_id: int, teacher_id: int) -> bool:
        return db.query(school_year_teachers_association).filter(
            school_year_teachers_association.c.school_year_id == school_year_id,
            school_year_teachers_association.c.teacher_id == teacher_id,
        ).first() is not None

school_year = CRUDSchoolYear(SchoolYear)
