from fastapi import Depends

from app.core.clock import Clock, get_system_clock
from app.core.database import SessionLocal
from app.services.lesson import LessonService
from app.services.lesson_completion import LessonCompletionService
from app.services.lesson_schedule import LessonScheduleService
from app.services.student_lesson import StudentLessonService


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_transactional_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

def get_clock() -> Clock:
    """Overridden in tests with a FixedClock."""
    return get_system_clock()

def get_lesson_service(clock: Clock = Depends(get_clock)) -> LessonService:
    return LessonService(clock)

def get_lesson_schedule_service(clock: Clock = Depends(get_clock)) -> LessonScheduleService:
    return LessonScheduleService(clock)

def get_lesson_completion_service(clock: Clock = Depends(get_clock)) -> LessonCompletionService:
    return LessonCompletionService(clock)

def get_student_lesson_service(clock: Clock = Depends(get_clock)) -> StudentLessonService:
    return StudentLessonService(clock)
