"""
QuizResult and QuizResultAnswer database models for finished quizzes.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codequiz.database import Base

if TYPE_CHECKING:
    from codequiz.models.db.user import User


class QuizResult(Base):
    """
    Finished quiz record.
    Written once when a signed-in user completes a session, never updated.
    """

    __tablename__ = "quiz_results"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    topic: Mapped[str] = mapped_column(String(200), index=True, nullable=False)
    difficulty: Mapped[str] = mapped_column(String(20), nullable=False)
    total_questions: Mapped[int] = mapped_column(nullable=False)
    score: Mapped[int] = mapped_column(default=0, nullable=False)
    time_taken_seconds: Mapped[int] = mapped_column(default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="quiz_results")
    answers: Mapped[list["QuizResultAnswer"]] = relationship(
        "QuizResultAnswer",
        back_populates="result",
        cascade="all, delete-orphan",
        order_by="QuizResultAnswer.position",
    )

    @property
    def percent_correct(self) -> float:
        """Calculate percentage of correct answers."""
        if self.total_questions == 0:
            return 0.0
        return (self.score / self.total_questions) * 100

    def __repr__(self) -> str:
        return f"<QuizResult(id={self.id}, user_id={self.user_id}, topic='{self.topic}')>"


class QuizResultAnswer(Base):
    """
    One answer log entry of a stored result.
    Keeps the question text, both option sets and the explanation as they
    were when the answer was checked.
    """

    __tablename__ = "quiz_result_answers"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    result_id: Mapped[int] = mapped_column(
        ForeignKey("quiz_results.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(nullable=False)

    question: Mapped[str] = mapped_column(Text, nullable=False)
    selected_answers_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    correct_answers_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    is_correct: Mapped[bool] = mapped_column(nullable=False)
    explanation: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("result_id", "position", name="uq_result_position"),
    )

    # Relationships
    result: Mapped["QuizResult"] = relationship("QuizResult", back_populates="answers")

    @property
    def selected_answers(self) -> list[str]:
        """Parse selected answers from JSON."""
        return _load_list(self.selected_answers_json)

    @selected_answers.setter
    def selected_answers(self, value: list[str]) -> None:
        """Serialize selected answers to JSON."""
        self.selected_answers_json = json.dumps(list(value), ensure_ascii=False)

    @property
    def correct_answers(self) -> list[str]:
        """Parse correct answers from JSON."""
        return _load_list(self.correct_answers_json)

    @correct_answers.setter
    def correct_answers(self, value: list[str]) -> None:
        """Serialize correct answers to JSON."""
        self.correct_answers_json = json.dumps(list(value), ensure_ascii=False)


def _load_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return []
    return value if isinstance(value, list) else []
