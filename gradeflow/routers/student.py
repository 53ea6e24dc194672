from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gradeflow.core.current_user import AuthContext
from gradeflow.core.deps import get_db
from gradeflow.core.permissions import require_student
from gradeflow.schemas.dashboard import StudentDashboard
from gradeflow.schemas.exam import AvailableExam
from gradeflow.schemas.submission import GrievableSubmission, StudentResult
from gradeflow.services import exams as exam_service
from gradeflow.services import statistics
from gradeflow.services import submissions as submission_service

router = APIRouter()


def _result_row(s) -> StudentResult:
    return StudentResult(
        id=s.id,
        exam_id=s.exam_id,
        exam_title=s.exam.title,
        exam_type=s.exam.exam_type,
        marks=s.marks,
        status=s.status,
        feedback=s.feedback,
        submitted_at=s.created_at,
        graded_at=s.graded_at,
    )


@router.get("/exams", response_model=list[AvailableExam])
def available_exams(
    db: Session = Depends(get_db),
    me: AuthContext = Depends(require_student),
):
    return [
        AvailableExam(
            id=row["exam"].id,
            title=row["exam"].title,
            exam_type=row["exam"].exam_type,
            deadline=row["exam"].deadline,
            created_at=row["exam"].created_at,
            has_submitted=row["has_submitted"],
            submission_status=row["submission_status"],
        )
        for row in exam_service.list_available_exams(db, me)
    ]


@router.get("/results", response_model=list[StudentResult])
def my_results(
    db: Session = Depends(get_db),
    me: AuthContext = Depends(require_student),
):
    return [_result_row(s) for s in submission_service.list_student_results(db, me)]


@router.get("/results/{exam_id}", response_model=StudentResult)
def my_result(
    exam_id: str,
    db: Session = Depends(get_db),
    me: AuthContext = Depends(require_student),
):
    return _result_row(submission_service.get_student_result(db, me, exam_id))


@router.get("/submissions", response_model=list[GrievableSubmission])
def grievable_submissions(
    db: Session = Depends(get_db),
    me: AuthContext = Depends(require_student),
):
    return [
        GrievableSubmission(
            id=s.id,
            exam_id=s.exam_id,
            exam_title=s.exam.title,
            marks=s.marks,
            feedback=s.feedback,
            graded_at=s.graded_at,
            status=s.status,
        )
        for s in submission_service.list_grievable_submissions(db, me)
    ]


@router.get("/dashboard", response_model=StudentDashboard)
def dashboard(
    db: Session = Depends(get_db),
    me: AuthContext = Depends(require_student),
):
    return statistics.student_dashboard(db, me)
