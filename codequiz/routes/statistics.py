"""Statistics endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from codequiz.dependencies import get_current_user, get_result_store
from codequiz.errors import StoreUnavailableError
from codequiz.models.db.user import User
from codequiz.models.results import DashboardResponse
from codequiz.services.result_service import ResultStore
from codequiz.services.stats_service import build_dashboard

router = APIRouter(prefix="/api/stats", tags=["statistics"])


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    user: Annotated[User, Depends(get_current_user)],
    store: Annotated[ResultStore, Depends(get_result_store)],
) -> DashboardResponse:
    """Overall accuracy, accuracy over time and per topic, and recent quizzes.

    A user without results gets zeros and empty lists.
    """
    try:
        results = store.list(user.id)
    except StoreUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return build_dashboard(results)
