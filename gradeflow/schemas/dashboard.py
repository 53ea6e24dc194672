from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from gradeflow.models.exam import ExamType


class InstructorStatistics(BaseModel):
    total_exams: int
    total_submissions: int
    pending_submissions: int
    students_graded: int


class RecentExam(BaseModel):
    id: str
    title: str
    exam_type: ExamType
    deadline: Optional[datetime] = None
    created_at: datetime
    total_submissions: int


class InstructorDashboard(BaseModel):
    statistics: InstructorStatistics
    grade_distribution: dict[str, int]
    recent_exams: list[RecentExam]


class StudentStatistics(BaseModel):
    total_exams_taken: int
    average_score: int
    pending_grading: int


class RecentlyGraded(BaseModel):
    id: str
    exam_id: str
    exam_title: str
    marks: Optional[float] = None
    graded_at: Optional[datetime] = None


class ScorePoint(BaseModel):
    name: str
    marks: float


class StudentDashboard(BaseModel):
    statistics: StudentStatistics
    recently_graded: list[RecentlyGraded]
    score_data: list[ScorePoint]
