from pydantic import BaseModel, ConfigDict, Field, PositiveInt
from typing import List, Optional
from datetime import datetime


class LessonScheduleCreate(BaseModel):
    start_date: datetime
    lesson_id: PositiveInt
    student_ids: Optional[List[PositiveInt]] = Field(default=None, min_length=1)

class LessonScheduleUpdate(BaseModel):
    start_date: Optional[datetime] = None
    student_ids: Optional[List[PositiveInt]] = Field(default=None, min_length=1)

class LessonSchedule(BaseModel):
    id: int
    start_date: datetime
    lesson_id: int
    student_ids: List[int] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class StudentLessonSchedule(BaseModel):
    id: int
    start_date: datetime
    is_upcoming: bool = False

    model_config = ConfigDict(from_attributes=True)

class ScheduledLessonSnippet(BaseModel):
    slug: str
    order_number: int
    title: str
    duration_seconds: Optional[int] = None
    excerpt: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class StudentCalendarEntry(StudentLessonSchedule):
    lesson: ScheduledLessonSnippet

class TeacherLessonSchedule(LessonSchedule):
    """Schedule as listed on a teacher's calendar."""
    lesson: ScheduledLessonSnippet
