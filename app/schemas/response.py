from datetime import datetime, timezone
from pydantic import BaseModel, Field
from typing import Generic, TypeVar, Optional, Any, Dict

from app.core.exceptions import LessonServiceError

DataType = TypeVar("DataType")

class APIResponse(BaseModel, Generic[DataType]):
    """Envelope of every successful lesson, schedule and completion response."""
    message: str = Field(..., description="What the request did, e.g. 'Lesson marked as completed'.")
    data: Optional[DataType] = Field(None, description="The lesson, schedule or completion payload, if any.")

class ErrorDetail(BaseModel):
    code: str = Field(..., description="Stable rejection code such as DUPLICATE_SCHEDULE")
    message: str = Field(..., description="Human-readable reason")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error context")

    @classmethod
    def from_service_error(cls, exc: LessonServiceError) -> "ErrorDetail":
        return cls(code=exc.code, message=exc.message, details=exc.details)

class ErrorResponse(BaseModel):
    error: ErrorDetail
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="When the request was rejected, UTC")
    path: str = Field(..., description="Request path that caused the error")
    request_id: Optional[str] = Field(None, description="Matches the X-Request-ID response header")
