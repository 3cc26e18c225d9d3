"""Service for cleanup operations."""
import logging
import threading
import time
from datetime import timedelta

from sqlalchemy.orm import Session, sessionmaker

from codequiz.config import SESSION_CLEANUP_INTERVAL_SECONDS, SESSION_IDLE_MINUTES
from codequiz.database import SessionLocal
from codequiz.services.auth_service import cleanup_expired_sessions
from codequiz.services.session_registry import SessionRegistry, registry

logger = logging.getLogger(__name__)


def cleanup_idle_sessions(
    target: SessionRegistry = registry,
    idle_minutes: int = SESSION_IDLE_MINUTES,
) -> int:
    """Remove abandoned quiz sessions from the registry."""
    if idle_minutes <= 0:
        return 0

    removed = target.purge_idle(timedelta(minutes=idle_minutes))
    if removed > 0:
        logger.info(f"Cleaned up {removed} idle quiz sessions")
    return removed


def cleanup_expired_tokens(session_factory: sessionmaker[Session] = SessionLocal) -> int:
    """Delete token sessions that have expired."""
    with session_factory() as db:
        removed = cleanup_expired_sessions(db)
    if removed > 0:
        logger.info(f"Cleaned up {removed} expired token sessions")
    return removed


def schedule_sessions_cleanup(
    interval_seconds: int = SESSION_CLEANUP_INTERVAL_SECONDS,
) -> threading.Thread:
    """Schedule periodic cleanup of idle quiz sessions and expired tokens."""

    def _worker() -> None:
        while True:
            time.sleep(interval_seconds)
            try:
                cleanup_idle_sessions()
                cleanup_expired_tokens()
            except Exception:
                logger.exception("Session cleanup failed")

    thread = threading.Thread(
        target=_worker,
        name="quiz_sessions_cleanup",
        daemon=True,
    )
    thread.start()
    return thread
