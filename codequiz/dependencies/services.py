"""Service dependencies for FastAPI."""
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from codequiz.database import SessionLocal
from codequiz.services.ai_service import AIService
from codequiz.services.result_service import ResultStore
from codequiz.services.result_submission import ResultSubmitter


def get_result_store() -> ResultStore:
    """Result store bound to the application database."""
    return ResultStore(SessionLocal)


@lru_cache
def get_ai_service() -> AIService:
    """Process-wide AI service; the OpenAI client is created on first use."""
    return AIService()


def get_result_submitter(
    store: Annotated[ResultStore, Depends(get_result_store)],
    ai: Annotated[AIService, Depends(get_ai_service)],
) -> ResultSubmitter:
    return ResultSubmitter(store=store, feedback_service=ai)
