from sqlalchemy import Boolean, Column, String, Integer, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base, UTCDateTime
from app.core.constants import ApprovalStatusEnum
from app.models.school_year import school_year_teachers_association

class TeacherAccount(Base):
    __tablename__ = "teacher_accounts"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    is_active = Column(Boolean(), default=True)
    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, onupdate=func.now())

    students = relationship("StudentAccount", back_populates="teacher")
    lessons = relationship("Lesson", back_populates="teacher")
    school_years = relationship("SchoolYear", secondary=school_year_teachers_association, back_populates="teachers")


class StudentAccount(Base):
    __tablename__ = "student_accounts"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    approval_status = Column(Enum(ApprovalStatusEnum), nullable=False, default=ApprovalStatusEnum.PENDING)
    teacher_id = Column(Integer, ForeignKey("teacher_accounts.id"), nullable=True, index=True)
    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, onupdate=func.now())

    teacher = relationship("TeacherAccount", back_populates="students")
    lesson_completions = relationship("LessonCompletion", back_populates="student")

    @property
    def is_active(self) -> bool:
        return self.approval_status == ApprovalStatusEnum.APPROVED
