from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gradeflow.core.current_user import AuthContext, get_auth_context
from gradeflow.core.deps import get_db
from gradeflow.core.errors import NotFound
from gradeflow.models.user import User
from gradeflow.schemas.user import UserRead

router = APIRouter()


@router.get("/me", response_model=UserRead)
def me(
    db: Session = Depends(get_db),
    caller: AuthContext = Depends(get_auth_context),
):
    user = db.get(User, caller.user_id)
    if not user:
        raise NotFound("User not found")
    return user
