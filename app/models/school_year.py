from sqlalchemy import Column, Integer, String, ForeignKey, Table, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base, UTCDateTime
from app.core.constants import RecordStatusEnum

school_year_teachers_association = Table(
    "school_year_teachers",
    Base.metadata,
    Column("school_year_id", Integer, ForeignKey("school_years.id", ondelete="CASCADE"), primary_key=True),
    Column("teacher_id", Integer, ForeignKey("teacher_accounts.id", ondelete="CASCADE"), primary_key=True),
)

class SchoolYear(Base):
    __tablename__ = "school_years"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    status = Column(Enum(RecordStatusEnum), nullable=False, default=RecordStatusEnum.DRAFT)
    start_date = Column(UTCDateTime, nullable=False)
    end_date = Column(UTCDateTime, nullable=False)
    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, onupdate=func.now())

    teachers = relationship("TeacherAccount", secondary=school_year_teachers_association, back_populates="school_years")
    lessons = relationship("Lesson", back_populates="school_year")
