from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session as DbSession, sessionmaker

from codequiz.errors import NotAuthenticatedError, StoreUnavailableError
from codequiz.models.db.user import User
from codequiz.services.quiz_session import CompletedQuiz, SubmittedAnswer
from codequiz.services.result_service import ResultStore, submitted_answers


def _create_user(session_factory: sessionmaker[DbSession], username: str) -> int:
    with session_factory() as db:
        user = User(username=username, email=f"{username}@example.com", hashed_password="x")
        db.add(user)
        db.commit()
        return user.id


def _completed(topic: str, finished_at: datetime, score: int = 1) -> CompletedQuiz:
    answers = (
        SubmittedAnswer("Q1", ("A",), ("A",), True, "first"),
        SubmittedAnswer("Q2", ("B", "D"), ("C",), False, "second"),
    )
    return CompletedQuiz(
        owner_id=None,
        topic=topic,
        difficulty="Medium",
        total_questions=2,
        score=score,
        time_taken_seconds=30,
        answers=answers,
        finished_at=finished_at,
    )


def test_store_and_get_round_trip(session_factory, result_store: ResultStore) -> None:
    user_id = _create_user(session_factory, "ada")
    result_id = result_store.store(_completed("Python", datetime.now(timezone.utc)), user_id)

    result = result_store.get(result_id, user_id)
    assert result is not None
    assert result.topic == "Python"
    assert result.percent_correct == 50.0
    assert [answer.question for answer in result.answers] == ["Q1", "Q2"]
    assert result.answers[1].selected_answers == ["B", "D"]
    assert result.answers[1].correct_answers == ["C"]

    rebuilt = submitted_answers(result)
    assert rebuilt[1].explanation == "second"
    assert rebuilt[1].is_correct is False


def test_list_is_ordered_by_creation_and_scoped_to_owner(
    session_factory, result_store: ResultStore
) -> None:
    ada = _create_user(session_factory, "ada")
    bob = _create_user(session_factory, "bob")
    now = datetime.now(timezone.utc)
    result_store.store(_completed("Later", now), ada)
    result_store.store(_completed("Earlier", now - timedelta(hours=1)), ada)
    result_store.store(_completed("Other", now), bob)

    assert [result.topic for result in result_store.list(ada)] == ["Earlier", "Later"]
    assert [result.topic for result in result_store.list(bob)] == ["Other"]


def test_get_hides_other_users_results(session_factory, result_store: ResultStore) -> None:
    ada = _create_user(session_factory, "ada")
    bob = _create_user(session_factory, "bob")
    result_id = result_store.store(_completed("Python", datetime.now(timezone.utc)), ada)
    assert result_store.get(result_id, bob) is None
    assert result_store.get(result_id + 100, ada) is None


def test_store_requires_owner(result_store: ResultStore) -> None:
    with pytest.raises(NotAuthenticatedError):
        result_store.store(_completed("Python", datetime.now(timezone.utc)), None)
    with pytest.raises(NotAuthenticatedError):
        result_store.list(None)


def test_database_errors_become_store_unavailable() -> None:
    # No tables were created on this engine.
    engine = create_engine("sqlite://")
    store = ResultStore(sessionmaker(bind=engine))
    with pytest.raises(StoreUnavailableError):
        store.store(_completed("Python", datetime.now(timezone.utc)), 1)
    with pytest.raises(StoreUnavailableError):
        store.list(1)
