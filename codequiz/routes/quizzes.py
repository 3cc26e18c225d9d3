"""Quiz creation endpoint."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from codequiz.dependencies import get_ai_service, get_session_context
from codequiz.errors import AIServiceError
from codequiz.models.sessions import QuizCreateRequest, SessionView
from codequiz.services.ai_service import AIService
from codequiz.services.quiz_service import build_session_view, start_quiz
from codequiz.services.quiz_session import SessionContext
from codequiz.services.session_registry import SessionRegistry, get_session_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])


@router.post("", response_model=SessionView, status_code=status.HTTP_201_CREATED)
async def create_quiz(
    payload: QuizCreateRequest,
    context: Annotated[SessionContext, Depends(get_session_context)],
    ai: Annotated[AIService, Depends(get_ai_service)],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> SessionView:
    """Generate questions on a topic and start a session for them.

    Signed-in users own the session and get their result saved; anyone
    else plays as a guest.
    """
    topic = payload.topic.strip()
    if not topic:
        raise HTTPException(status_code=400, detail="topic is required")

    try:
        entry = await start_quiz(
            ai, registry, topic, payload.question_count, payload.difficulty, context
        )
    except AIServiceError as exc:
        logger.error(f"Quiz generation failed for '{topic}': {exc}")
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return build_session_view(entry)
