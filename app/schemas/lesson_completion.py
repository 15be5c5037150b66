from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class LessonCompletionUpsert(BaseModel):
    is_completed: bool

class LessonCompletion(BaseModel):
    id: int
    lesson_id: int
    student_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
