"""Question builders and a fake AI service shared by the tests."""
from typing import Sequence

from codequiz.errors import AIServiceError
from codequiz.models.questions import (
    CodeSnippetQuestion,
    MultipleAnswerQuestion,
    MultipleChoiceQuestion,
    Question,
)
from codequiz.models.results import QuizFeedback
from codequiz.models.tutor import ChatMessage, LearningPathStep, TopicSuggestion
from codequiz.services.quiz_session import SubmittedAnswer

OPTIONS = ["A", "B", "C", "D"]


def mc_question(
    question: str = "Which letter comes first?",
    correct: str = "A",
    hints: Sequence[str] = ("It is a vowel.", "It starts the alphabet."),
    explanation: str = "A is the first letter.",
) -> MultipleChoiceQuestion:
    return MultipleChoiceQuestion(
        question=question,
        options=OPTIONS,
        correct_answers=[correct],
        explanation=explanation,
        hints=list(hints),
    )


def ma_question(
    question: str = "Which letters are vowels?",
    correct: Sequence[str] = ("A", "C"),
    hints: Sequence[str] = ("There are two.", "One of them is A.", "The other is not B."),
) -> MultipleAnswerQuestion:
    return MultipleAnswerQuestion(
        question=question,
        options=OPTIONS,
        correct_answers=list(correct),
        explanation="Only A and C count here.",
        hints=list(hints),
    )


def code_question() -> CodeSnippetQuestion:
    return CodeSnippetQuestion(
        question="```python\nprint(len([1, 2]))\n```",
        options=["1", "2", "3", "Error"],
        correct_answers=["2"],
        explanation="The list has two items.",
        hints=["len counts items.", "Count the elements."],
    )


class FakeAIService:
    """Stands in for AIService; records calls and can be told to fail."""

    def __init__(self) -> None:
        self.questions: list[Question] = [
            mc_question("Q1"),
            mc_question("Q2", correct="B"),
            mc_question("Q3", correct="C"),
        ]
        self.feedback = QuizFeedback(
            feedback="Nice work.",
            suggestions=["Python sets"],
            video_queries=["python set equality"],
        )
        self.fail_questions = False
        self.fail_feedback = False
        self.question_calls: list[tuple[str, int, str]] = []
        self.feedback_calls: list[tuple[str, list[SubmittedAnswer]]] = []

    async def generate_questions(self, topic: str, count: int, difficulty: str) -> list[Question]:
        self.question_calls.append((topic, count, difficulty))
        if self.fail_questions:
            raise AIServiceError(f"The AI could not generate questions for '{topic}'.")
        return self.questions[:count]

    async def generate_feedback(
        self, topic: str, answers: Sequence[SubmittedAnswer]
    ) -> QuizFeedback:
        self.feedback_calls.append((topic, list(answers)))
        if self.fail_feedback:
            raise AIServiceError("model timed out")
        return self.feedback

    async def generate_learning_path(self, topic: str) -> list[LearningPathStep]:
        return [
            LearningPathStep(topic=f"{topic} basics", description="Start here."),
            LearningPathStep(topic=f"Advanced {topic}", description="Then go deeper."),
        ]

    async def chat_with_tutor(self, topic: str, history: Sequence[ChatMessage]) -> str:
        return f"Let's talk about {topic}."

    async def suggest_topics(self, history: Sequence[ChatMessage]) -> TopicSuggestion:
        return TopicSuggestion(response="Try these.", suggested_topics=["Python Lists"])
