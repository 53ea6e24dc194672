from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from gradeflow.core.errors import ErrorKind
from gradeflow.models.exam import ExamType
from gradeflow.models.submission import SubmissionStatus


class SubmissionCreate(BaseModel):
    exam_id: str = Field(min_length=1)
    original_answer: str = Field(min_length=1)


class SubmissionRead(BaseModel):
    id: str
    student_id: str
    exam_id: str
    file_link: Optional[str] = None
    original_answers: Optional[dict[str, Any]] = None
    status: SubmissionStatus
    marks: Optional[float] = None
    match_percentage: Optional[float] = None
    feedback: Optional[str] = None
    graded_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SubmissionGradeUpdate(BaseModel):
    marks: float = Field(ge=0)
    feedback: Optional[str] = None
    match_percentage: Optional[float] = Field(default=None, ge=0, le=100)


class StudentResult(BaseModel):
    id: str
    exam_id: str
    exam_title: str
    exam_type: ExamType
    marks: Optional[float] = None
    status: SubmissionStatus
    feedback: Optional[str] = None
    submitted_at: datetime
    graded_at: Optional[datetime] = None


class GrievableSubmission(BaseModel):
    id: str
    exam_id: str
    exam_title: str
    marks: Optional[float] = None
    feedback: Optional[str] = None
    graded_at: Optional[datetime] = None
    status: SubmissionStatus


class UploadedFile(BaseModel):
    student_user_id: str
    filename: str
    file_link: str


class FailedFile(BaseModel):
    filename: str
    error: str
    kind: ErrorKind


class BatchUploadReport(BaseModel):
    uploaded: int
    failed: int
    results: list[UploadedFile]
    errors: list[FailedFile]
