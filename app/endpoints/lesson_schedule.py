from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.exceptions import InvalidRequestError
from app.schemas.lesson_schedule import (
    LessonSchedule, LessonScheduleCreate, LessonScheduleUpdate, StudentCalendarEntry, TeacherLessonSchedule,
)
from app.schemas.response import APIResponse
from app.services.lesson_schedule import LessonScheduleService
from app.utils import deps

router = APIRouter()


def _check_range(from_date: datetime, to_date: datetime):
    if from_date > to_date:
        raise InvalidRequestError(message="from_date must not be after to_date.")


@router.post("/teachers/{teacher_id}/lesson-schedules", response_model=APIResponse[LessonSchedule], status_code=201)
def create_lesson_schedule(
    *,
    db: Session = Depends(deps.get_transactional_db),
    teacher_id: int,
    schedule_in: LessonScheduleCreate,
    schedule_service: LessonScheduleService = Depends(deps.get_lesson_schedule_service),
):
    schedule = schedule_service.create(db, schedule_in=schedule_in, teacher_id=teacher_id)
    return APIResponse(message="Lesson schedule created successfully", data=LessonSchedule.model_validate(schedule))


@router.patch("/teachers/{teacher_id}/lesson-schedules/{schedule_id}", response_model=APIResponse[LessonSchedule])
def update_lesson_schedule(
    *,
    db: Session = Depends(deps.get_transactional_db),
    teacher_id: int,
    schedule_id: int,
    schedule_in: LessonScheduleUpdate,
    schedule_service: LessonScheduleService = Depends(deps.get_lesson_schedule_service),
):
    schedule = schedule_service.update(db, schedule_id=schedule_id, schedule_in=schedule_in, teacher_id=teacher_id)
    return APIResponse(message="Lesson schedule updated successfully", data=LessonSchedule.model_validate(schedule))


@router.delete("/teachers/{teacher_id}/lesson-schedules/{schedule_id}", response_model=APIResponse[bool])
def delete_lesson_schedule(
    *,
    db: Session = Depends(deps.get_transactional_db),
    teacher_id: int,
    schedule_id: int,
    schedule_service: LessonScheduleService = Depends(deps.get_lesson_schedule_service),
):
    deleted = schedule_service.delete(db, schedule_id=schedule_id, teacher_id=teacher_id)
    return APIResponse(message="Lesson schedule deleted successfully", data=deleted)


@router.get("/teachers/{teacher_id}/lesson-schedules", response_model=APIResponse[List[TeacherLessonSchedule]])
def list_teacher_lesson_schedules(
    *,
    db: Session = Depends(deps.get_db),
    teacher_id: int,
    from_date: datetime,
    to_date: datetime,
    schedule_service: LessonScheduleService = Depends(deps.get_lesson_schedule_service),
):
    _check_range(from_date, to_date)
    schedules = schedule_service.list_for_teacher(db, teacher_id=teacher_id, from_date=from_date, to_date=to_date)
    return APIResponse(
        message="Lesson schedules retrieved successfully",
        data=[TeacherLessonSchedule.model_validate(schedule) for schedule in schedules],
    )


@router.get("/students/{student_id}/lesson-schedules", response_model=APIResponse[List[StudentCalendarEntry]])
def list_student_lesson_schedules(
    *,
    db: Session = Depends(deps.get_db),
    student_id: int,
    from_date: datetime,
    to_date: datetime,
    schedule_service: LessonScheduleService = Depends(deps.get_lesson_schedule_service),
):
    _check_range(from_date, to_date)
    entries = schedule_service.list_for_student(db, student_id=student_id, from_date=from_date, to_date=to_date)
    return APIResponse(message="Lesson schedules retrieved successfully", data=entries)
