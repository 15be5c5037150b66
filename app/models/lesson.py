from sqlalchemy import Column, Integer, String, Text, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base, UTCDateTime
from app.core.constants import RecordStatusEnum
from app.models.school_year import SchoolYear
from app.models.user import TeacherAccount, StudentAccount
from app.models.lesson_schedule import LessonSchedule
from app.models.lesson_completion import LessonCompletion

class Lesson(Base):
    __tablename__ = "lessons"
    __table_args__ = (
        UniqueConstraint("teacher_id", "school_year_id", "order_number", name="uq_lessons_teacher_year_order"),
    )

    id = Column(Integer, primary_key=True, index=True)
    status = Column(Enum(RecordStatusEnum), nullable=False, default=RecordStatusEnum.DRAFT)
    order_number = Column(Integer, nullable=False)
    title = Column(String(255), index=True, nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    video_url = Column(String(255), nullable=False)
    duration_seconds = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    excerpt = Column(Text, nullable=True)
    teacher_id = Column(Integer, ForeignKey("teacher_accounts.id"), nullable=False, index=True)
    school_year_id = Column(Integer, ForeignKey("school_years.id"), nullable=False, index=True)
    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, onupdate=func.now())

    teacher = relationship("TeacherAccount", back_populates="lessons")
    school_year = relationship("SchoolYear", back_populates="lessons")
    schedules = relationship(
        "LessonSchedule",
        back_populates="lesson",
        cascade="all, delete-orphan",
        order_by=[LessonSchedule.start_date, LessonSchedule.id],
    )
    completions = relationship("LessonCompletion", back_populates="lesson", cascade="all, delete-orphan")

    @property
    def schedule(self):
        """The lesson's one schedule, or None. Extra rows are never surfaced."""
        return self.schedules[0] if self.schedules else None
