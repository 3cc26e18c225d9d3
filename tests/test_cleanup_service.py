from datetime import datetime, timedelta, timezone

from codequiz.models.db.user import Session, User
from codequiz.services.cleanup_service import cleanup_expired_tokens, cleanup_idle_sessions
from codequiz.services.quiz_session import QuizSession
from codequiz.services.session_registry import SessionRegistry
from factories import mc_question


def _session() -> QuizSession:
    return QuizSession(questions=[mc_question()], topic="Letters", difficulty="Easy")


def test_registry_hides_owned_sessions_from_others() -> None:
    registry = SessionRegistry()
    owned = registry.add(_session(), owner_id=5)
    guest = registry.add(_session(), owner_id=None)

    assert registry.get(owned.session_id) is owned
    assert owned.visible_to(5)
    assert not owned.visible_to(6)
    assert not owned.visible_to(None)
    assert guest.visible_to(None)
    assert guest.visible_to(6)


def test_discard_removes_session() -> None:
    registry = SessionRegistry()
    entry = registry.add(_session(), owner_id=None)
    assert registry.discard(entry.session_id) is True
    assert registry.discard(entry.session_id) is False
    assert registry.get(entry.session_id) is None


def test_cleanup_removes_only_idle_sessions() -> None:
    registry = SessionRegistry()
    stale = registry.add(_session(), owner_id=None)
    fresh = registry.add(_session(), owner_id=None)
    stale.last_activity = datetime.now(timezone.utc) - timedelta(hours=3)

    removed = cleanup_idle_sessions(registry, idle_minutes=120)

    assert removed == 1
    assert registry.get(stale.session_id) is None
    assert registry.get(fresh.session_id) is fresh
    assert len(registry) == 1


def test_cleanup_disabled_with_non_positive_idle_minutes() -> None:
    registry = SessionRegistry()
    entry = registry.add(_session(), owner_id=None)
    entry.last_activity = datetime.now(timezone.utc) - timedelta(days=1)
    assert cleanup_idle_sessions(registry, idle_minutes=0) == 0
    assert len(registry) == 1


def test_cleanup_expired_tokens(session_factory) -> None:
    now = datetime.now(timezone.utc)
    with session_factory() as db:
        user = User(username="ada", email="ada@example.com", hashed_password="x")
        db.add(user)
        db.flush()
        db.add(Session(user_id=user.id, token_jti="old", expires_at=now - timedelta(minutes=5)))
        db.add(Session(user_id=user.id, token_jti="new", expires_at=now + timedelta(minutes=5)))
        db.commit()

    assert cleanup_expired_tokens(session_factory) == 1
    with session_factory() as db:
        assert [row.token_jti for row in db.query(Session).all()] == ["new"]
