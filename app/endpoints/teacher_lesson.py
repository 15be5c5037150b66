from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import InvalidRequestError
from app.crud.base import PaginatedResponse
from app.crud.lesson_query import LessonOrdering, LessonQuery, parse_statuses
from app.schemas.lesson import Lesson, LessonCreate, LessonUpdate, StudentLessonProgress
from app.schemas.response import APIResponse
from app.services.lesson import LessonService
from app.utils import deps

router = APIRouter()


def _build_query(q, status, sort, school_year_id, skip, limit) -> LessonQuery:
    try:
        statuses = parse_statuses(status)
        ordering = LessonOrdering.parse(sort)
    except ValueError as e:
        raise InvalidRequestError(message=f"Invalid lesson filter: {e}")
    return (
        LessonQuery()
        .title_contains(q)
        .status_in(statuses)
        .school_year(school_year_id)
        .order_by(ordering)
        .page(skip=skip, limit=limit)
    )


@router.get("/teachers/{teacher_id}/lessons", response_model=APIResponse[PaginatedResponse[Lesson]])
def list_lessons(
    *,
    db: Session = Depends(deps.get_db),
    teacher_id: int,
    q: Optional[str] = None,
    status: Optional[str] = None,
    sort: Optional[str] = None,
    school_year_id: Optional[int] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_TAKE, ge=1, le=100),
    lesson_service: LessonService = Depends(deps.get_lesson_service),
):
    lesson_query = _build_query(q, status, sort, school_year_id, skip, limit)
    lessons, total = lesson_service.list_lessons(db, teacher_id=teacher_id, lesson_query=lesson_query)
    page = PaginatedResponse[Lesson](
        items=[Lesson.model_validate(lesson) for lesson in lessons],
        total=total,
        skip=skip,
        limit=limit,
        has_next=skip + len(lessons) < total,
    )
    return APIResponse(message="Lessons retrieved successfully", data=page)


@router.get("/teachers/{teacher_id}/lessons/snippets", response_model=APIResponse[List[Lesson]])
def get_lesson_snippets(
    *,
    db: Session = Depends(deps.get_db),
    teacher_id: int,
    take: Optional[int] = Query(None, ge=1, le=50),
    lesson_service: LessonService = Depends(deps.get_lesson_service),
):
    lessons = lesson_service.get_snippets(db, teacher_id=teacher_id, take=take)
    return APIResponse(message="Lesson snippets retrieved successfully", data=[Lesson.model_validate(lesson) for lesson in lessons])


@router.get("/teachers/{teacher_id}/lessons/{slug}", response_model=APIResponse[Lesson])
def get_lesson(
    *,
    db: Session = Depends(deps.get_db),
    teacher_id: int,
    slug: str,
    status: Optional[str] = None,
    lesson_service: LessonService = Depends(deps.get_lesson_service),
):
    try:
        statuses = list(parse_statuses(status)) or None
    except ValueError as e:
        raise InvalidRequestError(message=f"Invalid lesson filter: {e}")
    lesson = lesson_service.get_by_slug(db, teacher_id=teacher_id, slug=slug, statuses=statuses)
    return APIResponse(message="Lesson retrieved successfully", data=Lesson.model_validate(lesson))


@router.post("/teachers/{teacher_id}/lessons", response_model=APIResponse[Lesson], status_code=201)
def create_lesson(
    *,
    db: Session = Depends(deps.get_transactional_db),
    teacher_id: int,
    lesson_in: LessonCreate,
    lesson_service: LessonService = Depends(deps.get_lesson_service),
):
    lesson = lesson_service.create(db, lesson_in=lesson_in, teacher_id=teacher_id)
    return APIResponse(message="Lesson created successfully", data=Lesson.model_validate(lesson))


@router.patch("/teachers/{teacher_id}/lessons/{slug}", response_model=APIResponse[Lesson])
def update_lesson(
    *,
    db: Session = Depends(deps.get_transactional_db),
    teacher_id: int,
    slug: str,
    lesson_in: LessonUpdate,
    lesson_service: LessonService = Depends(deps.get_lesson_service),
):
    lesson = lesson_service.update(db, slug=slug, lesson_in=lesson_in, teacher_id=teacher_id)
    return APIResponse(message="Lesson updated successfully", data=Lesson.model_validate(lesson))


@router.delete("/teachers/{teacher_id}/lessons/{slug}", response_model=APIResponse[bool])
def delete_lesson(
    *,
    db: Session = Depends(deps.get_transactional_db),
    teacher_id: int,
    slug: str,
    lesson_service: LessonService = Depends(deps.get_lesson_service),
):
    deleted = lesson_service.delete(db, slug=slug, teacher_id=teacher_id)
    return APIResponse(message="Lesson deleted successfully", data=deleted)


@router.get("/teachers/{teacher_id}/students/{student_id}/lessons", response_model=APIResponse[List[StudentLessonProgress]])
def get_student_lesson_progress(
    *,
    db: Session = Depends(deps.get_db),
    teacher_id: int,
    student_id: int,
    lesson_service: LessonService = Depends(deps.get_lesson_service),
):
    progress = lesson_service.get_student_progress(db, teacher_id=teacher_id, student_id=student_id)
    return APIResponse(message="Student lesson progress retrieved successfully", data=progress)
