from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from gradeflow.models.exam import ExamType
from gradeflow.models.submission import SubmissionStatus


class ExamCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    exam_type: ExamType
    deadline: Optional[datetime] = None
    model_answer: Optional[str] = None
    rubric: Optional[str] = Field(default=None, max_length=5000)
    course_id: Optional[str] = None


class ExamUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    exam_type: Optional[ExamType] = None
    deadline: Optional[datetime] = None
    model_answer: Optional[str] = None
    rubric: Optional[str] = Field(default=None, max_length=5000)
    course_id: Optional[str] = None
    is_active: Optional[bool] = None

    # may be omitted, but never cleared
    @field_validator("title", "exam_type", "is_active")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("cannot be null")
        return value


class ExamRead(BaseModel):
    id: str
    instructor_id: str
    course_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    exam_type: ExamType
    deadline: Optional[datetime] = None
    model_answer: Optional[str] = None
    rubric: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ExamListRow(ExamRead):
    total_submissions: int = 0
    graded_submissions: int = 0


class AvailableExam(BaseModel):
    id: str
    title: str
    exam_type: ExamType
    deadline: Optional[datetime] = None
    created_at: datetime
    has_submitted: bool
    submission_status: Optional[SubmissionStatus] = None


class ExamHeader(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    exam_type: ExamType
    deadline: Optional[datetime] = None
    course_code: Optional[str] = None
    course_name: Optional[str] = None


class ExamResultRow(BaseModel):
    id: str
    student_id: str
    student_name: Optional[str] = None
    student_email: Optional[str] = None
    marks: Optional[float] = None
    feedback: str = ""
    status: SubmissionStatus
    graded_at: Optional[datetime] = None
    created_at: datetime


class ExamResults(BaseModel):
    exam: ExamHeader
    submissions: list[ExamResultRow]
