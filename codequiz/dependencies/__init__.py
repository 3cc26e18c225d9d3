"""FastAPI dependencies."""
from codequiz.dependencies.auth import (
    get_current_user,
    get_optional_user,
    get_session_context,
)
from codequiz.dependencies.services import (
    get_ai_service,
    get_result_store,
    get_result_submitter,
)

__all__ = [
    "get_ai_service",
    "get_current_user",
    "get_optional_user",
    "get_result_store",
    "get_result_submitter",
    "get_session_context",
]
