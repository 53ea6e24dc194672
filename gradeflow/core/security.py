from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from gradeflow.core.config import ACCESS_TOKEN_EXPIRE, ALGORITHM, SECRET_KEY
from gradeflow.core.errors import Unauthorized


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or ACCESS_TOKEN_EXPIRE)
    to_encode["exp"] = expire
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise Unauthorized("Invalid or expired token")
