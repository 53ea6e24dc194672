from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from gradeflow.core.errors import Unauthorized
from gradeflow.core.security import decode_access_token
from gradeflow.models.user import Role

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Caller identity passed explicitly into every service call."""

    user_id: str
    role: Role


def get_auth_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthContext:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthorized("Authentication required")

    payload = decode_access_token(credentials.credentials)
    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or role not in {r.value for r in Role}:
        raise Unauthorized("Authentication required")

    return AuthContext(user_id=str(user_id), role=Role(role))
