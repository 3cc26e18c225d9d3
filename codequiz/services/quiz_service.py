"""Starting quiz sessions and rendering them for API clients."""
from codequiz.models.results import SubmittedAnswerResponse
from codequiz.models.sessions import (
    CompletionResponse,
    QuestionView,
    RequestOutcomeResponse,
    SessionView,
)
from codequiz.services.ai_service import AIService
from codequiz.services.quiz_session import (
    QuizSession,
    SessionContext,
    SessionState,
    SubmittedAnswer,
)
from codequiz.services.session_registry import SessionEntry, SessionRegistry
from codequiz.services.stats_service import accuracy


async def start_quiz(
    ai: AIService,
    registry: SessionRegistry,
    topic: str,
    count: int,
    difficulty: str,
    context: SessionContext,
) -> SessionEntry:
    """Generate questions and register a fresh session for them.

    Raises:
        AIServiceError: if no usable questions could be generated.
    """
    questions = await ai.generate_questions(topic, count, difficulty)
    session = QuizSession(
        questions=questions,
        topic=topic,
        difficulty=difficulty,
        context=context,
    )
    return registry.add(session, owner_id=context.user_id)


def _answer_response(
    answer: SubmittedAnswer, show_explanation: bool = True
) -> SubmittedAnswerResponse:
    response = SubmittedAnswerResponse.model_validate(answer.to_dict())
    if not show_explanation:
        response.explanation = None
    return response


def build_session_view(entry: SessionEntry) -> SessionView:
    """Render a session. Answers are only included once they have been checked.

    The explanation is only shown after an incorrect answer.
    """
    session = entry.session
    question = session.current_question
    checked = session.state is SessionState.ANSWER_CHECKED
    show_explanation = checked and session.explanation_visible

    question_view = None
    if question is not None:
        question_view = QuestionView(
            kind=question.kind,
            question=question.question,
            options=list(question.options),
            hint_count=len(question.hints),
        )

    last_answer = session.last_answer if checked else None
    return SessionView(
        session_id=entry.session_id,
        topic=session.topic,
        difficulty=session.difficulty,
        state=session.state.value,
        current_index=session.current_index,
        total_questions=len(session.questions),
        score=session.score,
        question=question_view,
        selection=list(session.selection),
        revealed_hints=list(session.revealed_hints),
        last_answer=_answer_response(last_answer, show_explanation) if last_answer else None,
        explanation=question.explanation if show_explanation else None,
        enabled_actions=sorted(action.value for action in session.enabled_actions()),
    )


def build_completion_view(entry: SessionEntry) -> CompletionResponse:
    """Render the completion screen of a finished session."""
    report = entry.report
    completed = report.completed
    with report.lock:
        persistence = RequestOutcomeResponse(**report.persistence.to_dict())
        feedback = RequestOutcomeResponse(**report.feedback.to_dict())
        result_id = report.result_id
        feedback_payload = report.feedback_payload
    return CompletionResponse(
        session_id=entry.session_id,
        topic=completed.topic,
        difficulty=completed.difficulty,
        score=completed.score,
        total_questions=completed.total_questions,
        percent_correct=accuracy(completed.score, completed.total_questions),
        time_taken_seconds=completed.time_taken_seconds,
        answers=[_answer_response(answer) for answer in completed.answers],
        persistence=persistence,
        result_id=result_id,
        feedback=feedback,
        feedback_payload=feedback_payload,
    )
