"""Authentication dependencies for FastAPI."""
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session as DbSession

from codequiz.database import get_db
from codequiz.models.db.user import User
from codequiz.services.auth_service import (
    extend_session,
    get_active_session,
    get_user_by_id,
    verify_token,
)
from codequiz.services.quiz_session import GUEST, SessionContext

# HTTP Bearer scheme for JWT
security = HTTPBearer(auto_error=False)


class _AuthFailure(Exception):
    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


def _resolve_user(credentials: HTTPAuthorizationCredentials | None, db: DbSession) -> User:
    if credentials is None:
        raise _AuthFailure("Not authenticated")

    payload = verify_token(credentials.credentials)
    if payload is None:
        raise _AuthFailure("Invalid or expired token")

    # Check if session is still active
    jti = payload.get("jti")
    if jti:
        session = get_active_session(db, jti)
        if session is None:
            raise _AuthFailure("Session expired or invalidated")
        # Extend session on activity
        extend_session(db, session)

    user_id = payload.get("sub")
    if user_id is None:
        raise _AuthFailure("Invalid token payload")

    user = get_user_by_id(db, int(user_id))
    if user is None:
        raise _AuthFailure("User not found")
    if not user.is_active:
        raise _AuthFailure("User is inactive")
    return user


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[DbSession, Depends(get_db)],
) -> User:
    """Get the current authenticated user.

    Raises:
        HTTPException: 401 if not authenticated or token is invalid.
    """
    try:
        return _resolve_user(credentials, db)
    except _AuthFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.detail,
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


async def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[DbSession, Depends(get_db)],
) -> User | None:
    """Get the current user if authenticated, otherwise None.

    Quizzes can be taken as a guest, so a bad or missing token is not an error here.
    """
    try:
        return _resolve_user(credentials, db)
    except _AuthFailure:
        return None


async def get_session_context(
    user: Annotated[User | None, Depends(get_optional_user)],
) -> SessionContext:
    """Snapshot of who is signed in, captured when a quiz starts."""
    if user is None:
        return GUEST
    return SessionContext(user_id=user.id, username=user.username)
