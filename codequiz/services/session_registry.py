"""In-memory registry of live quiz sessions."""
from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from codequiz.services.quiz_session import QuizSession
from codequiz.services.result_submission import SubmissionReport

logger = logging.getLogger(__name__)


@dataclass
class SessionEntry:
    """A live session plus what the registry needs to manage it."""

    session_id: str
    session: QuizSession
    owner_id: int | None
    report: SubmissionReport | None = None
    last_activity: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def touch(self) -> None:
        self.last_activity = datetime.now(timezone.utc)

    def visible_to(self, user_id: int | None) -> bool:
        """Guest sessions are addressable by id; owned sessions only by their owner."""
        return self.owner_id is None or self.owner_id == user_id


class SessionRegistry:
    """Holds each session privately until it is discarded or goes idle."""

    def __init__(self) -> None:
        self._entries: dict[str, SessionEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def add(self, session: QuizSession, owner_id: int | None) -> SessionEntry:
        entry = SessionEntry(
            session_id=uuid.uuid4().hex,
            session=session,
            owner_id=owner_id,
        )
        with self._lock:
            self._entries[entry.session_id] = entry
        logger.info(
            f"Started quiz session {entry.session_id} on '{session.topic}' "
            f"({len(session.questions)} questions, owner={owner_id})"
        )
        return entry

    def get(self, session_id: str) -> SessionEntry | None:
        with self._lock:
            return self._entries.get(session_id)

    def discard(self, session_id: str) -> bool:
        with self._lock:
            entry = self._entries.pop(session_id, None)
        if entry is None:
            return False
        logger.info(f"Discarded quiz session {session_id}")
        return True

    def purge_idle(self, max_idle: timedelta) -> int:
        """Drop sessions with no activity for longer than ``max_idle``."""
        cutoff = datetime.now(timezone.utc) - max_idle
        with self._lock:
            stale = [
                session_id
                for session_id, entry in self._entries.items()
                if entry.last_activity < cutoff
            ]
            for session_id in stale:
                del self._entries[session_id]
        return len(stale)


registry = SessionRegistry()


def get_session_registry() -> SessionRegistry:
    """Dependency to get the process-wide session registry."""
    return registry
