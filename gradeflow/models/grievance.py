import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import relationship

from gradeflow.db.base_class import Base
from gradeflow.models.user import new_id


class GrievanceType(str, enum.Enum):
    SCORE_DISAGREEMENT = "SCORE_DISAGREEMENT"
    INCORRECT_FEEDBACK = "INCORRECT_FEEDBACK"
    MISSING_ANSWER = "MISSING_ANSWER"
    OTHER = "OTHER"


class GrievanceStatus(str, enum.Enum):
    PENDING = "PENDING"
    UNDER_REVIEW = "UNDER_REVIEW"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"


class GrievanceAction(str, enum.Enum):
    RESPOND = "respond"
    RESOLVE = "resolve"
    DISMISS = "dismiss"


TERMINAL_GRIEVANCE_STATUSES = frozenset({GrievanceStatus.RESOLVED, GrievanceStatus.REJECTED})


class Grievance(Base):
    __tablename__ = "grievances"

    id = Column(String(64), primary_key=True, default=new_id)

    submission_id = Column(String(64), ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(String(64), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    exam_id = Column(String(64), ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)

    grievance_type = Column(Enum(GrievanceType, name="grievance_type"), nullable=False)
    question_number = Column(Integer, nullable=True)
    description = Column(Text, nullable=False)

    status = Column(Enum(GrievanceStatus, name="grievance_status"), nullable=False, default=GrievanceStatus.PENDING)
    instructor_response = Column(Text, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("submission_id", name="uq_grievance_submission"),
    )

    submission = relationship("Submission", back_populates="grievance")
    student = relationship("Student")
    exam = relationship("Exam", back_populates="grievances")
