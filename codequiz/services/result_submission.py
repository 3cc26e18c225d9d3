"""Result submission and feedback retrieval for finished quiz sessions.

Finishing a session issues two independent requests: storing the result
(signed-in users only) and generating AI feedback. Each one settles its own
``RequestOutcome`` exactly once, and neither outcome affects the other.
"""
from __future__ import annotations

import asyncio
import enum
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence

from codequiz.errors import CodeQuizError
from codequiz.models.results import QuizFeedback
from codequiz.services.quiz_session import CompletedQuiz, SubmittedAnswer

logger = logging.getLogger(__name__)

GUEST_NOTICE = "Sign in to save your quiz results."
FEEDBACK_FAILED_NOTICE = "Could not load feedback."


class ResultStoreLike(Protocol):
    def store(self, result: CompletedQuiz, owner_id: int) -> int: ...


class FeedbackProvider(Protocol):
    async def generate_feedback(
        self, topic: str, answers: Sequence[SubmittedAnswer]
    ) -> QuizFeedback: ...


class RequestStatus(str, enum.Enum):
    """Lifecycle of one outstanding request."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class RequestOutcome:
    status: RequestStatus = RequestStatus.PENDING
    message: str | None = None

    @property
    def settled(self) -> bool:
        return self.status is not RequestStatus.PENDING

    def settle(self, status: RequestStatus, message: str | None = None) -> bool:
        """Record the final status. Only the first call has any effect."""
        if self.settled:
            logger.warning(
                f"Ignoring second outcome {status.value} (already {self.status.value})"
            )
            return False
        self.status = status
        self.message = message
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status.value, "message": self.message}


@dataclass
class SubmissionReport:
    """What a client polls after finishing a session."""

    completed: CompletedQuiz
    persistence: RequestOutcome = field(default_factory=RequestOutcome)
    feedback: RequestOutcome = field(default_factory=RequestOutcome)
    result_id: int | None = None
    feedback_payload: QuizFeedback | None = None
    # Guards the outcomes and their payloads while requests settle.
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def settled(self) -> bool:
        return self.persistence.settled and self.feedback.settled


class ResultSubmitter:
    """Hands a completed quiz to the result store and the feedback service."""

    def __init__(self, store: ResultStoreLike, feedback_service: FeedbackProvider) -> None:
        self.store = store
        self.feedback_service = feedback_service

    def begin(self, completed: CompletedQuiz) -> SubmissionReport:
        """Create the report for a finished session.

        Guests never reach the store: their persistence outcome is settled
        as skipped right away, which is expected and not an error.
        """
        report = SubmissionReport(completed=completed)
        if completed.owner_id is None:
            report.persistence.settle(RequestStatus.SKIPPED, GUEST_NOTICE)
        return report

    def persist(self, report: SubmissionReport) -> None:
        """Store the result and settle the persistence outcome."""
        if report.persistence.settled:
            return
        completed = report.completed
        try:
            result_id = self.store.store(completed, completed.owner_id)
        except CodeQuizError as exc:
            logger.error(f"Failed to save quiz result for '{completed.topic}': {exc}")
            self._settle(report, report.persistence, RequestStatus.FAILED, str(exc))
            return
        except Exception:
            logger.exception(f"Unexpected error saving quiz result for '{completed.topic}'")
            self._settle(
                report, report.persistence, RequestStatus.FAILED, "Could not save your result."
            )
            return
        with report.lock:
            report.result_id = result_id
            report.persistence.settle(RequestStatus.SUCCEEDED, "Your result is saved.")

    async def request_feedback(self, report: SubmissionReport) -> None:
        """Ask the AI for feedback on the answer log and settle the outcome."""
        if report.feedback.settled:
            return
        completed = report.completed
        try:
            feedback = await self.feedback_service.generate_feedback(
                completed.topic, completed.answers
            )
        except CodeQuizError as exc:
            logger.error(f"Feedback generation failed for '{completed.topic}': {exc}")
            self._settle(
                report, report.feedback, RequestStatus.FAILED, f"{FEEDBACK_FAILED_NOTICE} {exc}"
            )
            return
        except Exception:
            logger.exception(f"Unexpected error generating feedback for '{completed.topic}'")
            self._settle(report, report.feedback, RequestStatus.FAILED, FEEDBACK_FAILED_NOTICE)
            return
        with report.lock:
            report.feedback_payload = feedback
            report.feedback.settle(RequestStatus.SUCCEEDED)

    async def finalize(self, report: SubmissionReport) -> None:
        """Issue both requests concurrently; neither waits on the other."""
        await asyncio.gather(
            asyncio.to_thread(self.persist, report),
            self.request_feedback(report),
            return_exceptions=True,
        )

    async def submit(self, completed: CompletedQuiz) -> SubmissionReport:
        """Issue both requests and wait for them to settle."""
        report = self.begin(completed)
        await self.finalize(report)
        return report

    @staticmethod
    def _settle(
        report: SubmissionReport,
        outcome: RequestOutcome,
        status: RequestStatus,
        message: str | None = None,
    ) -> None:
        with report.lock:
            outcome.settle(status, message)
