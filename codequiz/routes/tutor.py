"""Learning path and AI tutor endpoints."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from codequiz.dependencies import get_ai_service
from codequiz.errors import AIServiceError
from codequiz.models.tutor import (
    LearningPathRequest,
    LearningPathResponse,
    TopicSuggestion,
    TopicSuggestionRequest,
    TutorChatRequest,
    TutorChatResponse,
)
from codequiz.services.ai_service import AIService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["tutor"])

AI = Annotated[AIService, Depends(get_ai_service)]


@router.post("/learning-paths", response_model=LearningPathResponse)
async def create_learning_path(payload: LearningPathRequest, ai: AI) -> LearningPathResponse:
    """Ordered steps from foundational to advanced concepts for a topic."""
    topic = payload.topic.strip()
    try:
        steps = await ai.generate_learning_path(topic)
    except AIServiceError as exc:
        logger.error(f"Learning path for '{topic}' failed: {exc}")
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return LearningPathResponse(topic=topic, path=steps)


@router.post("/tutor/chat", response_model=TutorChatResponse)
async def tutor_chat(payload: TutorChatRequest, ai: AI) -> TutorChatResponse:
    try:
        response = await ai.chat_with_tutor(payload.topic.strip(), payload.history)
    except AIServiceError as exc:
        logger.error(f"Tutor chat on '{payload.topic}' failed: {exc}")
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return TutorChatResponse(response=response)


@router.post("/tutor/suggest-topics", response_model=TopicSuggestion)
async def suggest_topics(payload: TopicSuggestionRequest, ai: AI) -> TopicSuggestion:
    """Chat with the landing-page tutor, which may suggest up to three topics."""
    try:
        return await ai.suggest_topics(payload.history)
    except AIServiceError as exc:
        logger.error(f"Topic suggestion failed: {exc}")
        raise HTTPException(status_code=502, detail=str(exc)) from exc
