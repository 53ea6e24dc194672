from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gradeflow.core.current_user import AuthContext
from gradeflow.core.deps import get_db
from gradeflow.core.permissions import require_instructor
from gradeflow.schemas.dashboard import InstructorDashboard
from gradeflow.services import statistics

router = APIRouter(tags=["instructor"])


@router.get("/instructor/dashboard", response_model=InstructorDashboard)
def instructor_dashboard(
    db: Session = Depends(get_db),
    me: AuthContext = Depends(require_instructor),
):
    return statistics.instructor_dashboard(db, me)
