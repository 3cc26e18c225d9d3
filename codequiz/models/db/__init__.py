"""Database models."""
from codequiz.models.db.user import User, Session
from codequiz.models.db.quiz_result import QuizResult, QuizResultAnswer

__all__ = [
    "User",
    "Session",
    "QuizResult",
    "QuizResultAnswer",
]
