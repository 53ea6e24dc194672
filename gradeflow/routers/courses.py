from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gradeflow.core.current_user import AuthContext
from gradeflow.core.deps import get_db
from gradeflow.core.permissions import require_instructor
from gradeflow.schemas.course import CourseRead
from gradeflow.services import exams as exam_service

router = APIRouter()


@router.get("", response_model=list[CourseRead])
def list_courses(
    db: Session = Depends(get_db),
    instructor: AuthContext = Depends(require_instructor),
):
    return exam_service.list_courses(db, instructor)
