from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gradeflow.core.current_user import AuthContext
from gradeflow.core.deps import get_db
from gradeflow.core.permissions import require_instructor, require_student
from gradeflow.models.grievance import Grievance
from gradeflow.schemas.grievance import (
    GrievanceCreate,
    GrievanceDetail,
    GrievanceExam,
    GrievanceRead,
    GrievanceSubmission,
    GrievanceUpdate,
)
from gradeflow.schemas.user import StudentBrief
from gradeflow.services import grievances as grievance_service

router = APIRouter()


def _detail(g: Grievance) -> GrievanceDetail:
    return GrievanceDetail(
        **GrievanceRead.model_validate(g).model_dump(),
        student=StudentBrief(
            id=g.student.id,
            user_id=g.student.user_id,
            name=g.student.user.name,
            email=g.student.user.email,
        ),
        exam=GrievanceExam(id=g.exam.id, title=g.exam.title, description=g.exam.description),
        submission=GrievanceSubmission(
            id=g.submission.id,
            marks=g.submission.marks,
            feedback=g.submission.feedback,
            status=g.submission.status,
            graded_at=g.submission.graded_at,
            created_at=g.submission.created_at,
        ),
    )


@router.post("", response_model=GrievanceRead, status_code=status.HTTP_201_CREATED)
def file_grievance(
    payload: GrievanceCreate,
    db: Session = Depends(get_db),
    student: AuthContext = Depends(require_student),
):
    return grievance_service.create_grievance(
        db,
        student,
        submission_id=payload.submission_id,
        grievance_type=payload.grievance_type,
        description=payload.description,
        question_number=payload.question_number,
    )


@router.get("", response_model=list[GrievanceDetail])
def list_grievances(
    db: Session = Depends(get_db),
    instructor: AuthContext = Depends(require_instructor),
):
    return [_detail(g) for g in grievance_service.list_grievances(db, instructor)]


@router.get("/{grievance_id}", response_model=GrievanceDetail)
def get_grievance(
    grievance_id: str,
    db: Session = Depends(get_db),
    instructor: AuthContext = Depends(require_instructor),
):
    return _detail(grievance_service.get_grievance(db, instructor, grievance_id))


@router.patch("/{grievance_id}", response_model=GrievanceRead)
def update_grievance(
    grievance_id: str,
    payload: GrievanceUpdate,
    db: Session = Depends(get_db),
    instructor: AuthContext = Depends(require_instructor),
):
    return grievance_service.transition_grievance(
        db,
        instructor,
        grievance_id,
        payload.action,
        payload.instructor_response,
    )
