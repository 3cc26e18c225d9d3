"""Authentication service: password hashing, JWTs and token sessions."""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy import delete, or_, select, update
from sqlalchemy.orm import Session as DbSession

from codequiz.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ALGORITHM,
    SECRET_KEY,
    SESSION_EXTEND_MINUTES,
)
from codequiz.models.db.user import Session, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedToken:
    access_token: str
    jti: str
    expires_in: int


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"), hashed_password.encode("utf-8")
    )


def create_access_token(user_id: int, jti: str | None = None) -> tuple[str, str]:
    """Create a JWT access token.

    Returns:
        Tuple of (token, jti)
    """
    if jti is None:
        jti = str(uuid.uuid4())

    expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user_id),
        "exp": expire,
        "jti": jti,
    }
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt, jti


def verify_token(token: str) -> dict | None:
    """Verify and decode a JWT token.

    Returns:
        Decoded token payload or None if invalid.
    """
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


def get_user_by_login(db: DbSession, login: str) -> User | None:
    """Get user by username or email."""
    return db.execute(
        select(User).where(or_(User.username == login, User.email == login))
    ).scalars().first()


def get_user_by_id(db: DbSession, user_id: int) -> User | None:
    """Get user by ID."""
    return db.get(User, user_id)


def username_or_email_taken(db: DbSession, username: str, email: str) -> str | None:
    """Return which of username/email is already registered, if any."""
    if db.execute(select(User.id).where(User.username == username)).first():
        return "Username already registered"
    if db.execute(select(User.id).where(User.email == email)).first():
        return "Email already registered"
    return None


def create_user(db: DbSession, username: str, email: str, password: str) -> User:
    """Create a new user."""
    user = User(
        username=username,
        email=email,
        hashed_password=hash_password(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.id} ({username})")
    return user


def authenticate_user(db: DbSession, login: str, password: str) -> User | None:
    """Return the active user matching the credentials, or None."""
    user = get_user_by_login(db, login)
    if user is None or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def issue_token(db: DbSession, user_id: int) -> IssuedToken:
    """Create an access token and the session row that keeps it valid."""
    token, jti = create_access_token(user_id)
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    db.add(Session(user_id=user_id, token_jti=jti, expires_at=expires_at))
    db.commit()
    return IssuedToken(
        access_token=token,
        jti=jti,
        expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def get_active_session(db: DbSession, token_jti: str) -> Session | None:
    """Get an active session by token JTI."""
    now = datetime.now(timezone.utc)
    return db.execute(
        select(Session).where(
            Session.token_jti == token_jti,
            Session.is_active == True,  # noqa: E712
            Session.expires_at > now,
        )
    ).scalars().first()


def extend_session(db: DbSession, session: Session) -> Session:
    """Extend session expiration and update last activity."""
    now = datetime.now(timezone.utc)
    session.last_activity = now
    session.expires_at = now + timedelta(minutes=SESSION_EXTEND_MINUTES)
    db.commit()
    db.refresh(session)
    return session


def invalidate_session(db: DbSession, token_jti: str) -> None:
    """Invalidate a session by token JTI."""
    db.execute(
        update(Session).where(Session.token_jti == token_jti).values(is_active=False)
    )
    db.commit()


def cleanup_expired_sessions(db: DbSession) -> int:
    """Remove expired token sessions from database."""
    now = datetime.now(timezone.utc)
    result = db.execute(delete(Session).where(Session.expires_at < now))
    db.commit()
    return result.rowcount
