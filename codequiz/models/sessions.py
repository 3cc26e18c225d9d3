"""Pydantic models for quiz sessions."""
from pydantic import BaseModel, Field

from codequiz.config import (
    QUIZ_DEFAULT_DIFFICULTY,
    QUIZ_DEFAULT_QUESTION_COUNT,
    QUIZ_MAX_QUESTION_COUNT,
)
from codequiz.models.results import QuizFeedback, SubmittedAnswerResponse


class QuizCreateRequest(BaseModel):
    """Request to generate a quiz and start a session."""

    topic: str = Field(..., min_length=2, max_length=200)
    question_count: int = Field(
        QUIZ_DEFAULT_QUESTION_COUNT, ge=1, le=QUIZ_MAX_QUESTION_COUNT
    )
    difficulty: str = Field(QUIZ_DEFAULT_DIFFICULTY, pattern="^(Easy|Medium|Hard)$")


class SelectOptionRequest(BaseModel):
    option: str


class QuestionView(BaseModel):
    """Current question as shown to the player (no answers)."""

    kind: str
    question: str
    options: list[str]
    hint_count: int


class SessionView(BaseModel):
    """Snapshot of a quiz session."""

    session_id: str
    topic: str
    difficulty: str
    state: str
    current_index: int
    total_questions: int
    score: int
    question: QuestionView | None
    selection: list[str]
    revealed_hints: list[str]
    last_answer: SubmittedAnswerResponse | None
    explanation: str | None
    enabled_actions: list[str]


class TransitionResponse(BaseModel):
    """Result of a session transition; ``applied`` is False for no-ops."""

    applied: bool
    session: SessionView


class RequestOutcomeResponse(BaseModel):
    status: str
    message: str | None = None


class CompletionResponse(BaseModel):
    """Completion screen data with the status of both finishing requests."""

    session_id: str
    topic: str
    difficulty: str
    score: int
    total_questions: int
    percent_correct: float
    time_taken_seconds: int
    answers: list[SubmittedAnswerResponse]
    persistence: RequestOutcomeResponse
    result_id: int | None
    feedback: RequestOutcomeResponse
    feedback_payload: QuizFeedback | None
