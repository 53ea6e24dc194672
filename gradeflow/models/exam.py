import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, String, Text, func
from sqlalchemy.orm import relationship

from gradeflow.db.base_class import Base
from gradeflow.models.user import new_id


class ExamType(str, enum.Enum):
    MCQ = "MCQ"
    TRUE_FALSE = "TRUE_FALSE"
    SHORT_ANSWER = "SHORT_ANSWER"
    MIXED = "MIXED"


class Exam(Base):
    __tablename__ = "exams"

    id = Column(String(64), primary_key=True, default=new_id)
    instructor_id = Column(String(64), ForeignKey("instructors.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(String(64), ForeignKey("courses.id", ondelete="SET NULL"), nullable=True, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    exam_type = Column(Enum(ExamType, name="exam_type"), nullable=False)
    deadline = Column(DateTime(timezone=True), nullable=True)
    model_answer = Column(Text, nullable=True)
    rubric = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    instructor = relationship("Instructor", back_populates="exams")
    course = relationship("Course", back_populates="exams")

    submissions = relationship("Submission", back_populates="exam", cascade="all, delete-orphan", passive_deletes=True)
    grievances = relationship("Grievance", back_populates="exam", cascade="all, delete-orphan", passive_deletes=True)
