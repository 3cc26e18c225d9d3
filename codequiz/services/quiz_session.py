"""Quiz session state machine.

A session walks a fixed, ordered list of questions. Each question is
answered, checked, then left with ``next()``; after the last question the
session finishes and produces a ``CompletedQuiz`` for result submission.

Transitions never raise when their preconditions are not met. They return
a falsy value and leave the session untouched; clients are expected to
disable the matching control using ``enabled_actions()``.
"""
from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Sequence

from codequiz.models.questions import MULTIPLE_ANSWER, Question
from codequiz.services.evaluator import evaluate

logger = logging.getLogger(__name__)


class SessionState(str, enum.Enum):
    """Where a session is in its question cycle."""

    ANSWERING = "answering"
    ANSWER_CHECKED = "answer_checked"
    FINISHED = "finished"


class SessionAction(str, enum.Enum):
    """Transitions a client can trigger."""

    SELECT = "select"
    CHECK_ANSWER = "check_answer"
    REVEAL_HINT = "reveal_hint"
    NEXT = "next"


@dataclass(frozen=True)
class SessionContext:
    """Identity of whoever started the session. Both fields are None for guests."""

    user_id: int | None = None
    username: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


GUEST = SessionContext()


@dataclass(frozen=True)
class SubmittedAnswer:
    """Answer log entry, snapshotted when the answer is checked."""

    question: str
    selected_answers: tuple[str, ...]
    correct_answers: tuple[str, ...]
    is_correct: bool
    explanation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "question": self.question,
            "selected_answers": list(self.selected_answers),
            "correct_answers": list(self.correct_answers),
            "is_correct": self.is_correct,
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class CompletedQuiz:
    """Everything result submission needs from a finished session."""

    owner_id: int | None
    topic: str
    difficulty: str
    total_questions: int
    score: int
    time_taken_seconds: int
    answers: tuple[SubmittedAnswer, ...]
    finished_at: datetime


@dataclass
class QuizSession:
    questions: Sequence[Question]
    topic: str
    difficulty: str
    context: SessionContext | None = GUEST
    clock: Callable[[], float] = time.time

    current_index: int = field(default=0, init=False)
    score: int = field(default=0, init=False)
    state: SessionState = field(default=SessionState.ANSWERING, init=False)
    answers: list[SubmittedAnswer] = field(default_factory=list, init=False)
    selection: list[str] = field(default_factory=list, init=False)
    revealed_hints: list[str] = field(default_factory=list, init=False)
    explanation_visible: bool = field(default=False, init=False)
    started_at: float = field(default=0.0, init=False)
    completion: CompletedQuiz | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        if not self.questions:
            raise ValueError("A quiz session needs at least one question")
        self.questions = tuple(self.questions)
        self.started_at = self.clock()

    @property
    def current_question(self) -> Question | None:
        if self.state is SessionState.FINISHED:
            return None
        return self.questions[self.current_index]

    @property
    def is_finished(self) -> bool:
        return self.state is SessionState.FINISHED

    @property
    def last_answer(self) -> SubmittedAnswer | None:
        return self.answers[-1] if self.answers else None

    def enabled_actions(self) -> set[SessionAction]:
        """Transitions whose preconditions currently hold."""
        actions: set[SessionAction] = set()
        if self.state is SessionState.ANSWERING:
            actions.add(SessionAction.SELECT)
            if self.selection:
                actions.add(SessionAction.CHECK_ANSWER)
            if len(self.revealed_hints) < len(self.current_question.hints):
                actions.add(SessionAction.REVEAL_HINT)
        elif self.state is SessionState.ANSWER_CHECKED:
            actions.add(SessionAction.NEXT)
        return actions

    def select(self, option: str) -> bool:
        """Select an option of the current question.

        Single-answer kinds replace the selection; multiple-answer toggles it.
        """
        if self.state is not SessionState.ANSWERING:
            return False
        question = self.current_question
        if option not in question.options:
            return False

        if question.kind == MULTIPLE_ANSWER:
            if option in self.selection:
                self.selection.remove(option)
            else:
                self.selection.append(option)
        else:
            self.selection = [option]
        return True

    def clear_selection(self) -> bool:
        """Drop every selected option of the current question."""
        if self.state is not SessionState.ANSWERING:
            return False
        self.selection = []
        return True

    def check_answer(self) -> SubmittedAnswer | None:
        """Evaluate the current selection and log it."""
        if self.state is not SessionState.ANSWERING or not self.selection:
            return None
        question = self.current_question

        is_correct = evaluate(self.selection, question.correct_answers)
        answer = SubmittedAnswer(
            question=question.question,
            selected_answers=tuple(o for o in question.options if o in self.selection),
            correct_answers=tuple(question.correct_answers),
            is_correct=is_correct,
            explanation=question.explanation,
        )
        self.answers.append(answer)
        if is_correct:
            self.score += 1
        self.explanation_visible = not is_correct
        self.state = SessionState.ANSWER_CHECKED
        return answer

    def reveal_hint(self) -> str | None:
        """Reveal the next unrevealed hint of the current question."""
        if self.state is not SessionState.ANSWERING:
            return None
        hints = self.current_question.hints
        if len(self.revealed_hints) >= len(hints):
            return None
        hint = hints[len(self.revealed_hints)]
        self.revealed_hints.append(hint)
        return hint

    def next(self) -> bool:
        """Advance past a checked answer, finishing after the last question.

        Returns True when the transition happened. When it finishes the
        session, ``completion`` is set; this happens at most once since
        FINISHED accepts no further transitions.
        """
        if self.state is not SessionState.ANSWER_CHECKED:
            return False

        if self.current_index < len(self.questions) - 1:
            self.current_index += 1
            self.selection = []
            self.revealed_hints = []
            self.explanation_visible = False
            self.state = SessionState.ANSWERING
            return True

        self._finish()
        return True

    def elapsed_seconds(self) -> int:
        return int(round(self.clock() - self.started_at))

    def _finish(self) -> None:
        context = self.context or GUEST
        self.state = SessionState.FINISHED
        self.selection = []
        self.revealed_hints = []
        self.completion = CompletedQuiz(
            owner_id=context.user_id,
            topic=self.topic,
            difficulty=self.difficulty,
            total_questions=len(self.questions),
            score=self.score,
            time_taken_seconds=self.elapsed_seconds(),
            answers=tuple(self.answers),
            finished_at=datetime.now(timezone.utc),
        )
        # Detach the caller identity; the completion keeps the owner id.
        self.context = None
        logger.info(
            f"Quiz on '{self.topic}' finished: {self.score}/{len(self.questions)} "
            f"in {self.completion.time_taken_seconds}s"
        )
