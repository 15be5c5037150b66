from enum import Enum


class RecordStatusEnum(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"

class ScheduleStatusEnum(str, Enum):
    UPCOMING = "upcoming"
    OPEN = "open"

class VisibilityEnum(str, Enum):
    HIDDEN = "hidden"
    PREVIEW = "preview"
    FULL = "full"

class ApprovalStatusEnum(str, Enum):
    MAIL_PENDING = "mail-pending"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class SortOrderEnum(str, Enum):
    ASC = "asc"
    DESC = "desc"

class LessonSortEnum(str, Enum):
    ORDER_NUMBER = "order_number"
    TITLE = "title"
    CREATED_AT = "created_at"
    SCHEDULE_DATE = "schedule_date"

class PastLessonPolicyEnum(str, Enum):
    # Open lessons always go to latest/previous
    PREVIOUS = "previous"
    # The earliest open lesson a student has not completed stays the upcoming pick
    CARRY_OVER = "carry_over"

class LessonEventEnum(str, Enum):
    LESSON_CREATED = "lesson.created"
    LESSON_UPDATED = "lesson.updated"
    LESSON_DELETED = "lesson.deleted"
    SCHEDULE_CREATED = "lesson_schedule.created"
    SCHEDULE_UPDATED = "lesson_schedule.updated"
    SCHEDULE_DELETED = "lesson_schedule.deleted"
    COMPLETION_CREATED = "lesson_completion.created"
    COMPLETION_DELETED = "lesson_completion.deleted"

# Lesson fields a student may see before the schedule opens
PREVIEW_LESSON_FIELDS = (
    "id",
    "status",
    "order_number",
    "title",
    "slug",
    "duration_seconds",
    "excerpt",
    "created_at",
    "updated_at",
)
