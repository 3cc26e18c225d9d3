"""Answer evaluation."""
from typing import Iterable


def evaluate(selected: Iterable[str], correct: Iterable[str]) -> bool:
    """Return True when the selection has exactly the members of the correct set.

    Order and repeated selections do not matter, so the same rule serves
    single-answer and multiple-answer questions. An empty selection never
    matches a non-empty correct set.
    """
    return set(selected) == set(correct)
