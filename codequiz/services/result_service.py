"""Service layer for stored quiz results."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession, selectinload, sessionmaker

from codequiz.errors import NotAuthenticatedError, StoreUnavailableError
from codequiz.models.db.quiz_result import QuizResult, QuizResultAnswer
from codequiz.services.quiz_session import CompletedQuiz, SubmittedAnswer

logger = logging.getLogger(__name__)


class ResultStore:
    """Persistence for finished quizzes, keyed by owning user.

    Results are only ever added and read back; there is no update or delete.
    Every call opens its own database session so the store can be used from
    background tasks after the request that finished the quiz has returned.
    """

    def __init__(self, session_factory: sessionmaker[DBSession]):
        self.session_factory = session_factory

    def store(self, result: CompletedQuiz, owner_id: int | None) -> int:
        """Persist a finished quiz and return its assigned id."""
        if owner_id is None:
            raise NotAuthenticatedError()

        record = QuizResult(
            user_id=owner_id,
            topic=result.topic,
            difficulty=result.difficulty,
            total_questions=result.total_questions,
            score=result.score,
            time_taken_seconds=result.time_taken_seconds,
            created_at=result.finished_at,
        )
        for position, answer in enumerate(result.answers):
            entry = QuizResultAnswer(
                position=position,
                question=answer.question,
                is_correct=answer.is_correct,
                explanation=answer.explanation,
            )
            entry.selected_answers = list(answer.selected_answers)
            entry.correct_answers = list(answer.correct_answers)
            record.answers.append(entry)

        try:
            with self.session_factory() as db:
                db.add(record)
                db.commit()
                result_id = record.id
        except SQLAlchemyError as exc:
            logger.error(f"Failed to store quiz result for user {owner_id}: {exc}")
            raise StoreUnavailableError() from exc

        logger.info(f"Stored quiz result {result_id} for user {owner_id}")
        return result_id

    def list(self, owner_id: int | None) -> list[QuizResult]:
        """Return a user's results, oldest first, with answers loaded."""
        if owner_id is None:
            raise NotAuthenticatedError()

        query = (
            select(QuizResult)
            .options(selectinload(QuizResult.answers))
            .where(QuizResult.user_id == owner_id)
            .order_by(QuizResult.created_at.asc(), QuizResult.id.asc())
        )
        try:
            with self.session_factory() as db:
                return list(db.execute(query).scalars().all())
        except SQLAlchemyError as exc:
            logger.error(f"Failed to list quiz results for user {owner_id}: {exc}")
            raise StoreUnavailableError() from exc

    def get(self, result_id: int, owner_id: int | None) -> QuizResult | None:
        """Return one of a user's results, or None if it is not theirs."""
        if owner_id is None:
            raise NotAuthenticatedError()

        query = (
            select(QuizResult)
            .options(selectinload(QuizResult.answers))
            .where(QuizResult.id == result_id, QuizResult.user_id == owner_id)
        )
        try:
            with self.session_factory() as db:
                return db.execute(query).scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.error(f"Failed to load quiz result {result_id}: {exc}")
            raise StoreUnavailableError() from exc


def submitted_answers(result: QuizResult) -> tuple[SubmittedAnswer, ...]:
    """Rebuild the answer log of a stored result."""
    return tuple(
        SubmittedAnswer(
            question=answer.question,
            selected_answers=tuple(answer.selected_answers),
            correct_answers=tuple(answer.correct_answers),
            is_correct=answer.is_correct,
            explanation=answer.explanation,
        )
        for answer in result.answers
    )
