"""Service layer for dashboard statistics."""
from collections import OrderedDict
from typing import Sequence

from codequiz.models.db.quiz_result import QuizResult
from codequiz.models.results import (
    AccuracyPoint,
    DashboardResponse,
    QuizResultSummary,
    TopicAccuracy,
)

RECENT_RESULTS_LIMIT = 20


def accuracy(score: int, total_questions: int) -> float:
    """Percentage of correct answers, rounded to one decimal."""
    if total_questions <= 0:
        return 0.0
    return round(score / total_questions * 100, 1)


def performance_over_time(results: Sequence[QuizResult]) -> list[AccuracyPoint]:
    """One point per result in creation order."""
    return [
        AccuracyPoint(
            result_id=result.id,
            date=result.created_at.date().isoformat(),
            accuracy=accuracy(result.score, result.total_questions),
            topic=result.topic,
        )
        for result in results
    ]


def topic_performance(results: Sequence[QuizResult]) -> list[TopicAccuracy]:
    """Accuracy per topic over all attempts, best topic first."""
    totals: OrderedDict[str, dict[str, int]] = OrderedDict()
    for result in results:
        bucket = totals.setdefault(
            result.topic, {"score": 0, "questions": 0, "attempts": 0}
        )
        bucket["score"] += result.score
        bucket["questions"] += result.total_questions
        bucket["attempts"] += 1

    topics = [
        TopicAccuracy(
            topic=topic,
            accuracy=accuracy(data["score"], data["questions"]),
            attempts=data["attempts"],
        )
        for topic, data in totals.items()
    ]
    return sorted(topics, key=lambda item: item.accuracy, reverse=True)


def overall_accuracy(results: Sequence[QuizResult]) -> float:
    total_score = sum(result.score for result in results)
    total_questions = sum(result.total_questions for result in results)
    return accuracy(total_score, total_questions)


def build_dashboard(results: Sequence[QuizResult]) -> DashboardResponse:
    """Aggregate a user's results, given oldest first."""
    recent = list(reversed(results))[:RECENT_RESULTS_LIMIT]
    return DashboardResponse(
        total_quizzes=len(results),
        overall_accuracy=overall_accuracy(results),
        performance_over_time=performance_over_time(results),
        topic_performance=topic_performance(results),
        recent_results=[QuizResultSummary.model_validate(result) for result in recent],
    )
