import pytest

from codequiz.services.quiz_session import (
    GUEST,
    QuizSession,
    SessionAction,
    SessionContext,
    SessionState,
)
from factories import code_question, ma_question, mc_question


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


def _session(questions, **kwargs) -> QuizSession:
    return QuizSession(questions=questions, topic="Letters", difficulty="Easy", **kwargs)


def _answer(session: QuizSession, *options: str) -> None:
    for option in options:
        session.select(option)
    assert session.check_answer() is not None


def test_session_requires_questions() -> None:
    with pytest.raises(ValueError):
        _session([])


def test_initial_state() -> None:
    session = _session([mc_question()])
    assert session.state is SessionState.ANSWERING
    assert session.current_index == 0
    assert session.score == 0
    assert session.answers == []
    assert session.revealed_hints == []
    assert session.enabled_actions() == {SessionAction.SELECT, SessionAction.REVEAL_HINT}


def test_three_question_session_scores_two() -> None:
    session = _session([mc_question("Q1"), mc_question("Q2"), mc_question("Q3")])

    _answer(session, "A")
    assert session.next() is True
    _answer(session, "B")
    assert session.next() is True
    _answer(session, "A")
    assert session.state is SessionState.ANSWER_CHECKED
    assert session.next() is True

    assert session.is_finished
    assert session.score == 2
    assert [answer.question for answer in session.answers] == ["Q1", "Q2", "Q3"]
    assert [answer.is_correct for answer in session.answers] == [True, False, True]
    assert session.score == sum(answer.is_correct for answer in session.answers)


def test_answer_log_length_tracks_current_index() -> None:
    session = _session([mc_question("Q1"), mc_question("Q2")])
    assert len(session.answers) == session.current_index
    _answer(session, "A")
    session.next()
    assert len(session.answers) == session.current_index == 1
    _answer(session, "A")
    session.next()
    assert len(session.answers) == len(session.questions)


def test_check_with_empty_selection_is_a_no_op() -> None:
    session = _session([mc_question()])
    assert session.check_answer() is None
    assert session.state is SessionState.ANSWERING
    assert session.answers == []
    assert SessionAction.CHECK_ANSWER not in session.enabled_actions()


def test_single_answer_select_replaces_selection() -> None:
    session = _session([mc_question()])
    assert session.select("A")
    assert session.select("B")
    assert session.selection == ["B"]


def test_select_rejects_unknown_option() -> None:
    session = _session([mc_question()])
    assert session.select("Z") is False
    assert session.selection == []


def test_multiple_answer_select_toggles() -> None:
    session = _session([ma_question()])
    session.select("A")
    session.select("B")
    session.select("B")
    assert session.selection == ["A"]


def test_clear_selection_empties_the_current_selection() -> None:
    session = _session([ma_question(), mc_question("Q2")])
    session.select("A")
    session.select("C")

    assert session.clear_selection() is True
    assert session.selection == []
    assert SessionAction.CHECK_ANSWER not in session.enabled_actions()

    _answer(session, "A", "C")
    assert session.clear_selection() is False
    assert session.state is SessionState.ANSWER_CHECKED


def test_multiple_answer_order_does_not_matter() -> None:
    session = _session([ma_question(correct=("A", "C"))])
    _answer(session, "C", "A")
    answer = session.last_answer
    assert answer.is_correct is True
    assert answer.selected_answers == ("A", "C")


def test_multiple_answer_partial_selection_is_incorrect() -> None:
    session = _session([ma_question(correct=("A", "C"))])
    _answer(session, "A")
    assert session.last_answer.is_correct is False
    assert session.score == 0


def test_explanation_visible_only_after_incorrect_answer() -> None:
    session = _session([mc_question("Q1"), code_question()])
    _answer(session, "A")
    assert session.explanation_visible is False
    session.next()
    _answer(session, "3")
    assert session.explanation_visible is True
    assert session.last_answer.explanation == "The list has two items."


def test_transitions_from_wrong_state_are_no_ops() -> None:
    session = _session([mc_question()])
    assert session.next() is False

    _answer(session, "A")
    assert session.select("B") is False
    assert session.check_answer() is None
    assert session.reveal_hint() is None
    assert session.enabled_actions() == {SessionAction.NEXT}
    assert len(session.answers) == 1

    session.next()
    assert session.is_finished
    assert session.enabled_actions() == set()
    assert session.select("A") is False
    assert session.check_answer() is None
    assert session.reveal_hint() is None
    assert session.next() is False
    assert len(session.answers) == 1


def test_hints_reveal_in_order_and_stop_at_declared_count() -> None:
    session = _session([mc_question(hints=("first", "second")), mc_question("Q2")])
    assert session.reveal_hint() == "first"
    assert session.reveal_hint() == "second"
    assert session.reveal_hint() is None
    assert session.revealed_hints == ["first", "second"]
    assert SessionAction.REVEAL_HINT not in session.enabled_actions()

    _answer(session, "A")
    session.next()
    assert session.revealed_hints == []
    assert session.selection == []
    assert SessionAction.REVEAL_HINT in session.enabled_actions()


def test_submitted_answer_is_a_snapshot() -> None:
    question = mc_question()
    session = _session([question])
    _answer(session, "A")
    question.explanation = "changed later"
    question.correct_answers.append("B")
    answer = session.last_answer
    assert answer.explanation == "A is the first letter."
    assert answer.correct_answers == ("A",)


def test_finish_records_elapsed_time_and_owner() -> None:
    clock = FakeClock()
    context = SessionContext(user_id=7, username="ada")
    session = _session([mc_question()], context=context, clock=clock)
    _answer(session, "A")
    clock.now += 41.6
    session.next()

    completed = session.completion
    assert completed.owner_id == 7
    assert completed.time_taken_seconds == 42
    assert completed.score == 1
    assert completed.total_questions == 1
    assert session.context is None


def test_guest_completion_has_no_owner() -> None:
    session = _session([mc_question()], context=GUEST)
    _answer(session, "A")
    session.next()
    assert session.completion.owner_id is None


def test_completion_is_produced_once() -> None:
    session = _session([mc_question()])
    _answer(session, "A")
    session.next()
    first = session.completion
    session.next()
    assert session.completion is first
