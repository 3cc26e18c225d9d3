"""Pydantic models for learning paths and the AI tutor."""
from typing import Literal

from pydantic import BaseModel, Field


class LearningPathStep(BaseModel):
    topic: str = Field(..., min_length=1)
    description: str


class LearningPathRequest(BaseModel):
    topic: str = Field(..., min_length=2, max_length=200)


class LearningPathResponse(BaseModel):
    topic: str
    path: list[LearningPathStep]


class ChatMessage(BaseModel):
    role: Literal["user", "model"]
    content: str


class TutorChatRequest(BaseModel):
    topic: str = Field(..., min_length=2, max_length=200)
    history: list[ChatMessage] = Field(..., min_length=1)


class TutorChatResponse(BaseModel):
    response: str


class TopicSuggestionRequest(BaseModel):
    history: list[ChatMessage] = Field(..., min_length=1)


class TopicSuggestion(BaseModel):
    """Conversational reply with 0-3 concrete quiz topics."""

    response: str
    suggested_topics: list[str] = Field(default_factory=list)
