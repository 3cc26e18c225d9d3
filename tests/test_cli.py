import asyncio

import cli
from codequiz.services.quiz_session import QuizSession
from codequiz.services.result_submission import ResultSubmitter
from factories import FakeAIService, ma_question, mc_question


class UnusedStore:
    def store(self, result, owner_id):
        raise AssertionError("guest results must not be stored")


def test_terminal_quiz_plays_and_reports() -> None:
    session = QuizSession(
        questions=[mc_question("Q1"), ma_question("Q2")],
        topic="Letters",
        difficulty="Easy",
    )
    replies = iter(["h", "9", "1", "1, 3"])
    output: list[str] = []

    cli.play(session, read=lambda prompt: next(replies), write=output.append)

    assert session.is_finished
    assert session.score == 2
    assert "Hint: It is a vowel." in output
    assert "Pick at least one option by its number." in output
    assert output.count("Correct!") == 2

    report = asyncio.run(ResultSubmitter(UnusedStore(), FakeAIService()).submit(session.completion))
    cli.print_report(report, write=output.append)

    assert "Sign in to save your quiz results." in output
    assert "Nice work." in output
    assert any(line.startswith("Quiz complete: 2/2") for line in output)
