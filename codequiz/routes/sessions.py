"""Quiz session endpoints.

Each endpoint maps to one transition of the session state machine. A
transition whose precondition does not hold is answered with
``applied: false`` and the unchanged session.
"""
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from codequiz.dependencies import get_optional_user, get_result_submitter
from codequiz.models.auth import MessageResponse
from codequiz.models.db.user import User
from codequiz.models.sessions import (
    CompletionResponse,
    SelectOptionRequest,
    SessionView,
    TransitionResponse,
)
from codequiz.services.quiz_service import build_completion_view, build_session_view
from codequiz.services.result_submission import ResultSubmitter
from codequiz.services.session_registry import SessionRegistry, get_session_registry
from codequiz.utils import get_visible_session

router = APIRouter(prefix="/api/sessions", tags=["sessions"])

OptionalUser = Annotated[User | None, Depends(get_optional_user)]
Registry = Annotated[SessionRegistry, Depends(get_session_registry)]


@router.get("/{session_id}", response_model=SessionView)
def get_session(session_id: str, user: OptionalUser, registry: Registry) -> SessionView:
    entry = get_visible_session(registry, session_id, user)
    with entry.lock:
        return build_session_view(entry)


@router.post("/{session_id}/select", response_model=TransitionResponse)
def select_option(
    session_id: str,
    payload: SelectOptionRequest,
    user: OptionalUser,
    registry: Registry,
) -> TransitionResponse:
    """Select (or, for multiple-answer questions, toggle) an option."""
    entry = get_visible_session(registry, session_id, user)
    with entry.lock:
        applied = entry.session.select(payload.option)
        return TransitionResponse(applied=applied, session=build_session_view(entry))


@router.post("/{session_id}/check", response_model=TransitionResponse)
def check_answer(session_id: str, user: OptionalUser, registry: Registry) -> TransitionResponse:
    entry = get_visible_session(registry, session_id, user)
    with entry.lock:
        applied = entry.session.check_answer() is not None
        return TransitionResponse(applied=applied, session=build_session_view(entry))


@router.post("/{session_id}/hint", response_model=TransitionResponse)
def reveal_hint(session_id: str, user: OptionalUser, registry: Registry) -> TransitionResponse:
    entry = get_visible_session(registry, session_id, user)
    with entry.lock:
        applied = entry.session.reveal_hint() is not None
        return TransitionResponse(applied=applied, session=build_session_view(entry))


@router.post("/{session_id}/next", response_model=TransitionResponse)
def next_question(
    session_id: str,
    background_tasks: BackgroundTasks,
    user: OptionalUser,
    registry: Registry,
    submitter: Annotated[ResultSubmitter, Depends(get_result_submitter)],
) -> TransitionResponse:
    """Advance to the next question, finishing the quiz after the last one.

    Finishing hands the result to the store and the feedback service in the
    background; poll ``/completion`` for their outcomes.
    """
    entry = get_visible_session(registry, session_id, user)
    with entry.lock:
        applied = entry.session.next()
        if applied and entry.session.is_finished:
            entry.report = submitter.begin(entry.session.completion)
            background_tasks.add_task(submitter.finalize, entry.report)
        return TransitionResponse(applied=applied, session=build_session_view(entry))


@router.get("/{session_id}/completion", response_model=CompletionResponse)
def get_completion(session_id: str, user: OptionalUser, registry: Registry) -> CompletionResponse:
    """Score, time taken and the status of the save and feedback requests."""
    entry = get_visible_session(registry, session_id, user)
    with entry.lock:
        if entry.report is None:
            raise HTTPException(status_code=400, detail="Quiz session is not finished")
        return build_completion_view(entry)


@router.delete("/{session_id}", response_model=MessageResponse)
def discard_session(session_id: str, user: OptionalUser, registry: Registry) -> MessageResponse:
    """Abandon a session; pending save and feedback requests still settle."""
    entry = get_visible_session(registry, session_id, user)
    registry.discard(entry.session_id)
    return MessageResponse(message="Quiz session discarded")
