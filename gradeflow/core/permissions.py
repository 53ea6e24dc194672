from fastapi import Depends

from gradeflow.core.current_user import AuthContext, get_auth_context
from gradeflow.core.errors import Forbidden
from gradeflow.models.user import Role


def require_instructor(caller: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if caller.role != Role.INSTRUCTOR:
        raise Forbidden("Instructor role required")
    return caller


def require_student(caller: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if caller.role != Role.STUDENT:
        raise Forbidden("Student role required")
    return caller
