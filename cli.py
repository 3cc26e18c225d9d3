import argparse
import asyncio
import logging
from typing import Callable

from codequiz.config import (
    QUIZ_DEFAULT_DIFFICULTY,
    QUIZ_DEFAULT_QUESTION_COUNT,
    QUIZ_MAX_QUESTION_COUNT,
)
from codequiz.database import SessionLocal
from codequiz.errors import AIServiceError
from codequiz.logging_setup import setup_console_logging
from codequiz.models.questions import MULTIPLE_ANSWER
from codequiz.services.ai_service import AIService
from codequiz.services.quiz_session import QuizSession
from codequiz.services.result_service import ResultStore
from codequiz.services.result_submission import RequestStatus, ResultSubmitter

logger = logging.getLogger(__name__)

Reader = Callable[[str], str]
Writer = Callable[[str], None]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play an AI-generated quiz in the terminal")
    parser.add_argument("topic", help="Quiz topic, e.g. 'Python dictionaries'")
    parser.add_argument(
        "--count",
        type=int,
        default=QUIZ_DEFAULT_QUESTION_COUNT,
        choices=range(1, QUIZ_MAX_QUESTION_COUNT + 1),
        metavar=f"1..{QUIZ_MAX_QUESTION_COUNT}",
        help="Number of questions",
    )
    parser.add_argument(
        "--difficulty",
        choices=["Easy", "Medium", "Hard"],
        default=QUIZ_DEFAULT_DIFFICULTY,
        help="Question difficulty",
    )
    return parser.parse_args()


def _ask_question(session: QuizSession, read: Reader, write: Writer) -> None:
    """Collect a selection for the current question and check it."""
    question = session.current_question
    write("")
    write(f"Question {session.current_index + 1}/{len(session.questions)}")
    write(question.question)
    for number, option in enumerate(question.options, start=1):
        write(f"  {number}. {option}")

    if question.kind == MULTIPLE_ANSWER:
        prompt = "Answers (e.g. 1,3), 'h' for a hint: "
    else:
        prompt = "Answer (1-4), 'h' for a hint: "

    while session.check_answer() is None:
        raw = read(prompt).strip().lower()
        if raw == "h":
            hint = session.reveal_hint()
            write(f"Hint: {hint}" if hint else "No more hints.")
            continue

        session.clear_selection()
        for part in dict.fromkeys(raw.replace(" ", "").split(",")):
            if part.isdigit() and 1 <= int(part) <= len(question.options):
                session.select(question.options[int(part) - 1])
        if not session.selection:
            write("Pick at least one option by its number.")

    answer = session.last_answer
    if answer.is_correct:
        write("Correct!")
    else:
        write(f"Incorrect. Correct answer: {', '.join(answer.correct_answers)}")
        write(f"Explanation: {answer.explanation}")


def play(session: QuizSession, read: Reader = input, write: Writer = print) -> None:
    """Run a session to completion on the terminal."""
    while not session.is_finished:
        _ask_question(session, read, write)
        session.next()


def print_report(report, write: Writer = print) -> None:
    completed = report.completed
    write("")
    write(
        f"Quiz complete: {completed.score}/{completed.total_questions} "
        f"in {completed.time_taken_seconds}s"
    )
    if report.persistence.message:
        write(report.persistence.message)

    if report.feedback.status is RequestStatus.SUCCEEDED:
        feedback = report.feedback_payload
        write("")
        write(feedback.feedback)
        if feedback.suggestions:
            write("Next topics: " + ", ".join(feedback.suggestions))
        if feedback.video_queries:
            write("Search for videos: " + "; ".join(feedback.video_queries))
    else:
        write(report.feedback.message or "Could not load feedback.")


async def run_quiz(args: argparse.Namespace) -> int:
    ai = AIService()
    # Guest sessions never reach the store.
    submitter = ResultSubmitter(store=ResultStore(SessionLocal), feedback_service=ai)

    try:
        questions = await ai.generate_questions(args.topic, args.count, args.difficulty)
    except AIServiceError as exc:
        logger.error(f"Could not generate a quiz: {exc}")
        return 1

    session = QuizSession(questions=questions, topic=args.topic, difficulty=args.difficulty)
    play(session)
    report = await submitter.submit(session.completion)
    print_report(report)
    return 0


def main() -> None:
    setup_console_logging()
    raise SystemExit(asyncio.run(run_quiz(parse_args())))


if __name__ == "__main__":
    main()
