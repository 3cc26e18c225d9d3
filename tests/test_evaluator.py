from codequiz.services.evaluator import evaluate


def test_evaluate_requires_identical_membership() -> None:
    assert evaluate(["A"], ["A"]) is True
    assert evaluate(["B"], ["A"]) is False
    assert evaluate(["A", "B"], ["A"]) is False
    assert evaluate(["A"], ["A", "C"]) is False


def test_evaluate_ignores_order_and_duplicates() -> None:
    assert evaluate(["C", "A"], ["A", "C"]) is True
    assert evaluate(["A", "C", "A"], ["A", "C"]) is True


def test_empty_selection_is_never_correct() -> None:
    assert evaluate([], ["A"]) is False
    assert evaluate(set(), ["A", "B"]) is False
