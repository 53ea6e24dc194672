from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from gradeflow.core.config import GRIEVANCE_MIN_DESCRIPTION
from gradeflow.models.grievance import GrievanceAction, GrievanceStatus, GrievanceType
from gradeflow.models.submission import SubmissionStatus
from gradeflow.schemas.user import StudentBrief


class GrievanceCreate(BaseModel):
    submission_id: str = Field(min_length=1)
    grievance_type: GrievanceType
    question_number: Optional[int] = Field(default=None, ge=1)
    description: str = Field(min_length=GRIEVANCE_MIN_DESCRIPTION)


class GrievanceUpdate(BaseModel):
    action: GrievanceAction
    instructor_response: Optional[str] = None


class GrievanceRead(BaseModel):
    id: str
    submission_id: str
    student_id: str
    exam_id: str
    grievance_type: GrievanceType
    question_number: Optional[int] = None
    description: str
    status: GrievanceStatus
    instructor_response: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class GrievanceExam(BaseModel):
    id: str
    title: str
    description: Optional[str] = None


class GrievanceSubmission(BaseModel):
    id: str
    marks: Optional[float] = None
    feedback: Optional[str] = None
    status: SubmissionStatus
    graded_at: Optional[datetime] = None
    created_at: datetime


class GrievanceDetail(GrievanceRead):
    student: StudentBrief
    exam: GrievanceExam
    submission: GrievanceSubmission
