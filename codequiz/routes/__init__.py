"""API route modules."""
from codequiz.routes import auth, quizzes, results, sessions, statistics, tutor

__all__ = ["auth", "quizzes", "results", "sessions", "statistics", "tutor"]
