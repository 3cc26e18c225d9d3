"""Pydantic models for quiz results, feedback and dashboard statistics."""
from datetime import datetime

from pydantic import BaseModel, Field


class QuizFeedback(BaseModel):
    """AI-written feedback on a finished quiz."""

    feedback: str = Field(..., min_length=1)
    suggestions: list[str] = Field(default_factory=list)
    video_queries: list[str] = Field(default_factory=list)


class SubmittedAnswerResponse(BaseModel):
    """One entry of a quiz answer log."""

    question: str
    selected_answers: list[str]
    correct_answers: list[str]
    is_correct: bool
    explanation: str | None = None

    class Config:
        from_attributes = True


class QuizResultSummary(BaseModel):
    """Stored quiz result without its answer log."""

    id: int
    topic: str
    difficulty: str
    total_questions: int
    score: int
    time_taken_seconds: int
    created_at: datetime

    class Config:
        from_attributes = True


class QuizResultResponse(QuizResultSummary):
    """Stored quiz result with its answer log."""

    answers: list[SubmittedAnswerResponse]


class QuizResultListResponse(BaseModel):
    results: list[QuizResultSummary]
    total: int


class AccuracyPoint(BaseModel):
    result_id: int
    date: str
    accuracy: float
    topic: str


class TopicAccuracy(BaseModel):
    topic: str
    accuracy: float
    attempts: int


class DashboardResponse(BaseModel):
    """Aggregated performance for the dashboard."""

    total_quizzes: int
    overall_accuracy: float
    performance_over_time: list[AccuracyPoint]
    topic_performance: list[TopicAccuracy]
    recent_results: list[QuizResultSummary]
