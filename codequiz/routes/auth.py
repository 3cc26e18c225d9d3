"""Authentication routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session as DbSession

from codequiz.database import get_db
from codequiz.dependencies.auth import get_current_user, security
from codequiz.models.auth import (
    MessageResponse,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from codequiz.models.db.user import User
from codequiz.services.auth_service import (
    IssuedToken,
    authenticate_user,
    create_user,
    invalidate_session,
    issue_token,
    username_or_email_taken,
    verify_token,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _token_response(issued: IssuedToken) -> TokenResponse:
    return TokenResponse(
        access_token=issued.access_token,
        token_type="bearer",
        expires_in=issued.expires_in,
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: UserRegister,
    db: Annotated[DbSession, Depends(get_db)],
) -> User:
    """Register a new user."""
    conflict = username_or_email_taken(db, data.username, data.email)
    if conflict:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=conflict)

    return create_user(db, data.username, data.email, data.password)


@router.post("/login", response_model=TokenResponse)
async def login(
    data: UserLogin,
    db: Annotated[DbSession, Depends(get_db)],
) -> TokenResponse:
    """Login with username or email and get a JWT token."""
    user = authenticate_user(db, data.username, data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    return _token_response(issue_token(db, user.id))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[DbSession, Depends(get_db)],
) -> MessageResponse:
    """Logout and invalidate current session."""
    if credentials is None:
        return MessageResponse(message="Already logged out")

    payload = verify_token(credentials.credentials)
    if payload and payload.get("jti"):
        invalidate_session(db, payload["jti"])

    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get current user info."""
    return current_user


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    current_user: Annotated[User, Depends(get_current_user)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[DbSession, Depends(get_db)],
) -> TokenResponse:
    """Swap the current token for a fresh one."""
    payload = verify_token(credentials.credentials) or {}
    old_jti = payload.get("jti")
    if old_jti:
        invalidate_session(db, old_jti)

    return _token_response(issue_token(db, current_user.id))
