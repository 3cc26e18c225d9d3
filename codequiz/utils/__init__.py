"""Utility modules."""
from codequiz.utils.validation import get_visible_session, validate_session_id

__all__ = [
    "get_visible_session",
    "validate_session_id",
]
