from datetime import datetime, timedelta, timezone

from codequiz.models.db.quiz_result import QuizResult
from codequiz.services import stats_service


def _result(result_id: int, topic: str, score: int, total: int, days_ago: int) -> QuizResult:
    return QuizResult(
        id=result_id,
        user_id=1,
        topic=topic,
        difficulty="Medium",
        total_questions=total,
        score=score,
        time_taken_seconds=60,
        created_at=datetime(2024, 5, 10, tzinfo=timezone.utc) - timedelta(days=days_ago),
    )


def test_accuracy_rounds_and_handles_zero() -> None:
    assert stats_service.accuracy(2, 3) == 66.7
    assert stats_service.accuracy(0, 0) == 0.0


def test_empty_history_yields_zeros() -> None:
    dashboard = stats_service.build_dashboard([])
    assert dashboard.total_quizzes == 0
    assert dashboard.overall_accuracy == 0.0
    assert dashboard.performance_over_time == []
    assert dashboard.topic_performance == []
    assert dashboard.recent_results == []


def test_dashboard_aggregates_results() -> None:
    results = [
        _result(1, "Python", 1, 4, days_ago=2),
        _result(2, "SQL", 5, 5, days_ago=1),
        _result(3, "Python", 3, 4, days_ago=0),
    ]
    dashboard = stats_service.build_dashboard(results)

    assert dashboard.total_quizzes == 3
    assert dashboard.overall_accuracy == round(9 / 13 * 100, 1)
    assert [point.result_id for point in dashboard.performance_over_time] == [1, 2, 3]
    assert dashboard.performance_over_time[0].date == "2024-05-08"
    assert dashboard.performance_over_time[0].accuracy == 25.0

    topics = [(item.topic, item.accuracy, item.attempts) for item in dashboard.topic_performance]
    assert topics == [("SQL", 100.0, 1), ("Python", 50.0, 2)]
    assert [item.id for item in dashboard.recent_results] == [3, 2, 1]
