"""Quiz history endpoints (signed-in users only)."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from codequiz.dependencies import get_ai_service, get_current_user, get_result_store
from codequiz.errors import AIServiceError, StoreUnavailableError
from codequiz.models.db.quiz_result import QuizResult
from codequiz.models.db.user import User
from codequiz.models.results import (
    QuizFeedback,
    QuizResultListResponse,
    QuizResultResponse,
    QuizResultSummary,
)
from codequiz.models.sessions import SessionView
from codequiz.services.ai_service import AIService
from codequiz.services.quiz_service import build_session_view, start_quiz
from codequiz.services.quiz_session import SessionContext
from codequiz.services.result_service import ResultStore, submitted_answers
from codequiz.services.session_registry import SessionRegistry, get_session_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/results", tags=["results"])

CurrentUser = Annotated[User, Depends(get_current_user)]
Store = Annotated[ResultStore, Depends(get_result_store)]


def _load_result(store: ResultStore, result_id: int, user: User) -> QuizResult:
    try:
        result = store.get(result_id, user.id)
    except StoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    if result is None:
        raise HTTPException(status_code=404, detail="Quiz result not found")
    return result


@router.get("", response_model=QuizResultListResponse)
def list_results(user: CurrentUser, store: Store) -> QuizResultListResponse:
    """List the user's results, newest first."""
    try:
        results = store.list(user.id)
    except StoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return QuizResultListResponse(
        results=[QuizResultSummary.model_validate(result) for result in reversed(results)],
        total=len(results),
    )


@router.get("/{result_id}", response_model=QuizResultResponse)
def get_result(result_id: int, user: CurrentUser, store: Store) -> QuizResult:
    return _load_result(store, result_id, user)


@router.post(
    "/{result_id}/retry",
    response_model=SessionView,
    status_code=status.HTTP_201_CREATED,
)
async def retry_result(
    result_id: int,
    user: CurrentUser,
    store: Store,
    ai: Annotated[AIService, Depends(get_ai_service)],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> SessionView:
    """Start a new quiz with the topic, difficulty and size of a past one."""
    result = _load_result(store, result_id, user)
    context = SessionContext(user_id=user.id, username=user.username)
    try:
        entry = await start_quiz(
            ai, registry, result.topic, result.total_questions, result.difficulty, context
        )
    except AIServiceError as exc:
        logger.error(f"Retry of result {result_id} failed: {exc}")
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return build_session_view(entry)


@router.post("/{result_id}/feedback", response_model=QuizFeedback)
async def regenerate_feedback(
    result_id: int,
    user: CurrentUser,
    store: Store,
    ai: Annotated[AIService, Depends(get_ai_service)],
) -> QuizFeedback:
    """Ask for fresh feedback on a stored result."""
    result = _load_result(store, result_id, user)
    try:
        return await ai.generate_feedback(result.topic, submitted_answers(result))
    except AIServiceError as exc:
        logger.error(f"Feedback for result {result_id} failed: {exc}")
        raise HTTPException(status_code=502, detail=str(exc)) from exc
