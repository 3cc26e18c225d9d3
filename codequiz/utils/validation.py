"""Validation utilities."""
import re

from fastapi import HTTPException

from codequiz.models.db.user import User
from codequiz.services.session_registry import SessionEntry, SessionRegistry

_SESSION_ID_RE = re.compile(r"^[0-9a-f]{32}$")


def validate_session_id(value: str) -> str:
    """Validate a quiz session id (uuid4 hex)."""
    cleaned = value.strip().lower() if isinstance(value, str) else ""
    if not cleaned:
        raise HTTPException(status_code=400, detail="sessionId is required")
    if not _SESSION_ID_RE.match(cleaned):
        raise HTTPException(status_code=400, detail="Invalid sessionId")
    return cleaned


def get_visible_session(
    registry: SessionRegistry, session_id: str, user: User | None
) -> SessionEntry:
    """Look up a session the caller may see; others' sessions are reported missing."""
    entry = registry.get(validate_session_id(session_id))
    user_id = user.id if user is not None else None
    if entry is None or not entry.visible_to(user_id):
        raise HTTPException(status_code=404, detail="Quiz session not found")
    entry.touch()
    return entry
