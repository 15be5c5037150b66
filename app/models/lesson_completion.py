from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base, UTCDateTime


class LessonCompletion(Base):
    __tablename__ = "lesson_completions"
    __table_args__ = (
        UniqueConstraint("lesson_id", "student_id", name="uq_lesson_completions_lesson_student"),
    )

    id = Column(Integer, primary_key=True, index=True)
    lesson_id = Column(Integer, ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("student_accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(UTCDateTime, server_default=func.now())

    lesson = relationship("Lesson", back_populates="completions")
    student = relationship("StudentAccount", back_populates="lesson_completions")
