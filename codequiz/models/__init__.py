"""Pydantic models."""
from codequiz.models.auth import (
    MessageResponse,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from codequiz.models.questions import Question, parse_question
from codequiz.models.results import (
    DashboardResponse,
    QuizFeedback,
    QuizResultListResponse,
    QuizResultResponse,
    QuizResultSummary,
)
from codequiz.models.sessions import (
    CompletionResponse,
    QuizCreateRequest,
    SelectOptionRequest,
    SessionView,
    TransitionResponse,
)

__all__ = [
    "CompletionResponse",
    "DashboardResponse",
    "MessageResponse",
    "Question",
    "QuizCreateRequest",
    "QuizFeedback",
    "QuizResultListResponse",
    "QuizResultResponse",
    "QuizResultSummary",
    "SelectOptionRequest",
    "SessionView",
    "TokenResponse",
    "TransitionResponse",
    "UserLogin",
    "UserRegister",
    "UserResponse",
    "parse_question",
]
