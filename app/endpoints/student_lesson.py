from typing import List, Optional, Union
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.schemas.lesson import LessonPreview, StudentLesson, StudentLessonFeed, StudentLessonProgress
from app.schemas.lesson_completion import LessonCompletion, LessonCompletionUpsert
from app.schemas.response import APIResponse
from app.services.lesson_completion import LessonCompletionService
from app.services.student_lesson import StudentLessonService
from app.utils import deps

router = APIRouter()


@router.get("/students/{student_id}/lessons", response_model=APIResponse[StudentLessonFeed])
def get_lesson_feed(
    *,
    db: Session = Depends(deps.get_db),
    student_id: int,
    q: Optional[str] = None,
    school_year_id: Optional[int] = None,
    student_lesson_service: StudentLessonService = Depends(deps.get_student_lesson_service),
):
    feed = student_lesson_service.get_feed(db, student_id=student_id, q=q, school_year_id=school_year_id)
    return APIResponse(message="Lessons retrieved successfully", data=feed)


@router.get("/students/{student_id}/lesson-progress", response_model=APIResponse[List[StudentLessonProgress]])
def get_lesson_progress(
    *,
    db: Session = Depends(deps.get_db),
    student_id: int,
    student_lesson_service: StudentLessonService = Depends(deps.get_student_lesson_service),
):
    progress = student_lesson_service.get_progress(db, student_id=student_id)
    return APIResponse(message="Lesson progress retrieved successfully", data=progress)


@router.get("/students/{student_id}/lessons/{slug}", response_model=APIResponse[Union[StudentLesson, LessonPreview]])
def get_lesson(
    *,
    db: Session = Depends(deps.get_db),
    student_id: int,
    slug: str,
    school_year_id: Optional[int] = None,
    student_lesson_service: StudentLessonService = Depends(deps.get_student_lesson_service),
):
    lesson = student_lesson_service.get_by_slug(db, student_id=student_id, slug=slug, school_year_id=school_year_id)
    return APIResponse(message="Lesson retrieved successfully", data=lesson)


@router.put("/students/{student_id}/lessons/{lesson_id}/completion", response_model=APIResponse[Optional[LessonCompletion]])
def set_lesson_completion(
    *,
    db: Session = Depends(deps.get_transactional_db),
    student_id: int,
    lesson_id: int,
    completion_in: LessonCompletionUpsert,
    completion_service: LessonCompletionService = Depends(deps.get_lesson_completion_service),
):
    completion = completion_service.set_completion(
        db, lesson_id=lesson_id, student_id=student_id, is_completed=completion_in.is_completed
    )
    message = "Lesson marked as completed" if completion else "Lesson marked as not completed"
    return APIResponse(
        message=message,
        data=LessonCompletion.model_validate(completion) if completion else None,
    )
