import enum

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from gradeflow.db.base_class import Base
from gradeflow.models.user import new_id


class SubmissionStatus(str, enum.Enum):
    PENDING = "PENDING"
    GRADED = "GRADED"


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(String(64), primary_key=True, default=new_id)

    student_id = Column(String(64), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    exam_id = Column(String(64), ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)

    file_link = Column(Text, nullable=True)
    original_answers = Column(JSON, nullable=True)

    status = Column(Enum(SubmissionStatus, name="submission_status"), nullable=False, default=SubmissionStatus.PENDING)

    # Grading fields (null until graded, cleared again on re-upload)
    marks = Column(Float, nullable=True)
    match_percentage = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)
    graded_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("student_id", "exam_id", name="uq_submission_student_exam"),
        CheckConstraint(
            "(status = 'GRADED' AND marks IS NOT NULL AND graded_at IS NOT NULL) OR "
            "(status = 'PENDING' AND marks IS NULL AND feedback IS NULL AND graded_at IS NULL)",
            name="ck_submission_grade_fields",
        ),
        CheckConstraint(
            "file_link IS NOT NULL OR original_answers IS NOT NULL",
            name="ck_submission_has_answer",
        ),
    )

    student = relationship("Student", back_populates="submissions")
    exam = relationship("Exam", back_populates="submissions")
    grievance = relationship("Grievance", back_populates="submission", uselist=False, passive_deletes=True)
