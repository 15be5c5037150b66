from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator
from typing import List, Optional, Union
from datetime import datetime

from app.core.constants import RecordStatusEnum, VisibilityEnum
from app.schemas.lesson_schedule import LessonSchedule, StudentLessonSchedule
from app.schemas.lesson_completion import LessonCompletion


def _validate_video_url(v):
    if v is not None and not v.startswith(("http://", "https://")):
        raise ValueError("Video URL must be an http(s) URL.")
    return v

class LessonBase(BaseModel):
    status: RecordStatusEnum = Field(default=RecordStatusEnum.DRAFT)
    order_number: PositiveInt
    title: str = Field(min_length=1, max_length=255)
    video_url: str = Field(max_length=255)
    duration_seconds: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    excerpt: Optional[str] = None

class LessonCreate(LessonBase):
    start_date: Optional[datetime] = None
    student_ids: Optional[List[PositiveInt]] = Field(default=None, min_length=1)
    school_year_id: Optional[PositiveInt] = None

    @field_validator("video_url")
    def validate_video_url(cls, v):
        return _validate_video_url(v)

class LessonUpdate(BaseModel):
    status: Optional[RecordStatusEnum] = None
    order_number: Optional[PositiveInt] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    video_url: Optional[str] = Field(default=None, max_length=255)
    duration_seconds: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    excerpt: Optional[str] = None
    start_date: Optional[datetime] = None
    student_ids: Optional[List[PositiveInt]] = Field(default=None, min_length=1)

    @field_validator("video_url")
    def validate_video_url(cls, v):
        return _validate_video_url(v)

class Lesson(LessonBase):
    id: int
    slug: str
    teacher_id: int
    school_year_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    schedules: List[LessonSchedule] = []

    model_config = ConfigDict(from_attributes=True)

class LessonPreview(BaseModel):
    """What a student sees of a lesson whose schedule has not opened yet."""
    id: int
    status: RecordStatusEnum
    order_number: int
    title: str
    slug: str
    duration_seconds: Optional[int] = None
    excerpt: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    visibility: VisibilityEnum = VisibilityEnum.PREVIEW
    schedule: Optional[StudentLessonSchedule] = None

    model_config = ConfigDict(from_attributes=True)

class StudentLesson(LessonPreview):
    visibility: VisibilityEnum = VisibilityEnum.FULL
    video_url: str
    description: Optional[str] = None
    completion: Optional[LessonCompletion] = None

class StudentLessonFeed(BaseModel):
    upcoming_lesson: Optional[Union[StudentLesson, LessonPreview]] = None
    latest_lesson: Optional[StudentLesson] = None
    previous_lessons: List[StudentLesson] = []

class StudentLessonProgress(BaseModel):
    """A lesson with the one schedule and the completion that apply to a student."""
    id: int
    status: RecordStatusEnum
    order_number: int
    title: str
    slug: str
    duration_seconds: Optional[int] = None
    excerpt: Optional[str] = None
    schedule: Optional[StudentLessonSchedule] = None
    completion: Optional[LessonCompletion] = None

    model_config = ConfigDict(from_attributes=True)
