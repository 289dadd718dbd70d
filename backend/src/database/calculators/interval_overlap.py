"""
Interval overlap detection for room allocations.

Stays are half-open intervals [start, end): a checkout on the same instant
as the next check-in is NOT a conflict.

The detector sorts by start and sweeps with an active set, which reports
exactly the pairs a full pairwise comparison would, in O(n log n + k) for
n intervals and k overlapping pairs.
"""
from typing import Any, Callable, List, Sequence, Tuple, TypeVar

T = TypeVar("T")


def intervals_overlap(start1: Any, end1: Any, start2: Any, end2: Any) -> bool:
    """Half-open overlap test: start1 < end2 AND start2 < end1."""
    return start1 < end2 and start2 < end1


def find_overlapping_pairs(
    items: Sequence[T],
    start: Callable[[T], Any],
    end: Callable[[T], Any],
    tiebreak: Callable[[T], Any] = lambda item: 0,
) -> List[Tuple[T, T]]:
    """
    Find every pair of overlapping intervals.

    Args:
        items: Objects carrying an interval
        start: Accessor for the interval start
        end: Accessor for the interval end
        tiebreak: Secondary sort key so that output does not depend on input order

    Returns:
        List of (earlier, later) pairs, earlier by (start, end, tiebreak)
    """
    ordered = sorted(items, key=lambda item: (start(item), end(item), tiebreak(item)))

    pairs: List[Tuple[T, T]] = []
    active: List[T] = []
    for item in ordered:
        item_start = start(item)
        # Anything that ended at or before this start cannot overlap it or anything later
        active = [other for other in active if end(other) > item_start]
        for other in active:
            if intervals_overlap(start(other), end(other), item_start, end(item)):
                pairs.append((other, item))
        active.append(item)

    return pairs
