from sqlalchemy import Column, Integer, ForeignKey, Table
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base, UTCDateTime
from app.utils.audience import Audience

lesson_schedule_students_association = Table(
    "lesson_schedule_students",
    Base.metadata,
    Column("lesson_schedule_id", Integer, ForeignKey("lesson_schedules.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", Integer, ForeignKey("student_accounts.id", ondelete="CASCADE"), primary_key=True),
)

class LessonSchedule(Base):
    __tablename__ = "lesson_schedules"

    id = Column(Integer, primary_key=True, index=True)
    start_date = Column(UTCDateTime, nullable=False, index=True)
    lesson_id = Column(Integer, ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, onupdate=func.now())

    lesson = relationship("Lesson", back_populates="schedules")
    students = relationship("StudentAccount", secondary=lesson_schedule_students_association)

    @property
    def audience(self) -> Audience:
        return Audience.from_ids(student.id for student in self.students)

    @property
    def student_ids(self):
        return sorted(student.id for student in self.students)
