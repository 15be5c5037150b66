from typing import Any, Dict, Optional
from fastapi import status


class LessonServiceError(Exception):
    """Base for every rejection the lesson core raises."""
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "LESSON_SERVICE_ERROR"
    message: str = "Request could not be completed."

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


class NotFoundError(LessonServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    message = "Resource not found."

class ConflictError(LessonServiceError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    message = "Resource conflicts with existing data."

class PreconditionFailedError(LessonServiceError):
    status_code = status.HTTP_412_PRECONDITION_FAILED
    code = "PRECONDITION_FAILED"
    message = "Resource is not in a state that allows this action."

class InvalidRequestError(LessonServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_REQUEST"
    message = "Invalid request."


class LessonNotFound(NotFoundError):
    code = "LESSON_NOT_FOUND"
    message = "Lesson not found."

class ScheduleNotFound(NotFoundError):
    code = "SCHEDULE_NOT_FOUND"
    message = "Lesson schedule not found."

class StudentNotFound(NotFoundError):
    code = "STUDENT_NOT_FOUND"
    message = "Student not found."

class DuplicateOrderNumber(ConflictError):
    code = "DUPLICATE_ORDER_NUMBER"
    message = "Lesson number is already present."

class DuplicateSchedule(ConflictError):
    code = "DUPLICATE_SCHEDULE"
    message = "Lesson cannot have more than one schedule."

class LessonNotAvailable(PreconditionFailedError):
    code = "LESSON_NOT_AVAILABLE"
    message = "Lesson not available."

class ScheduleFrozen(PreconditionFailedError):
    code = "SCHEDULE_FROZEN"
    message = "Cannot change the start date of a lesson that has completions."

class HasCompletions(PreconditionFailedError):
    code = "HAS_COMPLETIONS"
    message = "Lesson has completions."

class LessonFrozen(PreconditionFailedError):
    code = "LESSON_FROZEN"
    message = "Cannot unpublish or renumber a lesson that has completions."

class SpecificStudentsUnsupported(InvalidRequestError):
    code = "SPECIFIC_STUDENTS_UNSUPPORTED"
    message = "Cannot set lesson to specific students at this time."

class InvalidSchoolYear(InvalidRequestError):
    code = "INVALID_SCHOOL_YEAR"
    message = "Invalid school year."

class LessonNotPublished(InvalidRequestError):
    code = "LESSON_NOT_PUBLISHED"
    message = "Only published lessons can be scheduled."

class DuplicateSlug(ConflictError):
    code = "DUPLICATE_SLUG"
    message = "Another lesson already uses this number and title."
