import logging
from typing import Optional
from sqlalchemy.orm import Session

from app.core.clock import Clock, SystemClock
from app.core.exceptions import InvalidSchoolYear
from app.crud.school_year import school_year as crud_school_year
from app.models.school_year import SchoolYear

logger = logging.getLogger(__name__)


class SchoolYearService:
    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()

    def get_current(self, db: Session) -> Optional[SchoolYear]:
        return crud_school_year.get_current(db, now=self.clock.now())

    def resolve(self, db: Session, school_year_id: Optional[int] = None) -> SchoolYear:
        """The requested school year, or the current one when none is given."""
        if school_year_id is not None:
            school_year = crud_school_year.get(db, id=school_year_id)
        else:
            school_year = self.get_current(db)

        if not school_year:
            logger.warning(f"No school year resolved for id={school_year_id}")
            raise InvalidSchoolYear()
        return school_year

    def resolve_for_teacher(self, db: Session, teacher_id: int, school_year_id: Optional[int] = None) -> SchoolYear:
        school_year = self.resolve(db, school_year_id)
        if not crud_school_year.is_teacher_enrolled(db, school_year_id=school_year.id, teacher_id=teacher_id):
            logger.warning(f"Teacher {teacher_id} is not enrolled in school year {school_year.id}")
            raise InvalidSchoolYear()
        return school_year
