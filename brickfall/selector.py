"""Weighted random choice with a caller-supplied sample."""
from __future__ import annotations

from typing import Iterable, Sequence, TypeVar

from brickfall.types import WeightedItem

T = TypeVar("T")


def total_weight(items: Iterable[WeightedItem[T]]) -> float:
    """Sum of weights with negatives clamped to zero."""
    return sum(max(0.0, item.weight) for item in items)


def select_weighted(
    items: Sequence[WeightedItem[T]], random_value: float
) -> T | None:
    """Pick the item whose cumulative interval contains random_value * total.

    random_value is expected in [0, 1). Returns None when the total weight
    is zero (empty list, or every weight zero/negative). Zero-weight items
    are never selected.
    """
    total = total_weight(items)
    if total <= 0.0:
        return None

    threshold = random_value * total
    cumulative = 0.0
    last: T | None = None
    for item in items:
        weight = max(0.0, item.weight)
        if weight == 0.0:
            continue
        cumulative += weight
        last = item.value
        if threshold < cumulative:
            return item.value
    # Float rounding can leave threshold == total; fall back to the last
    # item that carried weight.
    return last
