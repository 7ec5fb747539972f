"""Half-open ``[start, end)`` interval helpers on integer nanosecond counters."""
from __future__ import annotations

from typing import Iterable, List, Tuple

Interval = Tuple[int, int]


def merge_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """Return the union of ``intervals`` as a sorted, non-overlapping list.

    Touching intervals (``[a, b)`` followed by ``[b, c)``) are merged into
    one.  Zero-length intervals take part in the sweep but never extend the
    covered time.
    """
    ordered = sorted(intervals)
    if not ordered:
        return []
    merged: List[Interval] = []
    cur_start, cur_end = ordered[0]
    for start, end in ordered:
        if end < start:
            raise AssertionError(f"interval [{start}, {end}) ends before it starts")
        if start <= cur_end:
            if end > cur_end:
                cur_end = end
            continue
        merged.append((cur_start, cur_end))
        cur_start, cur_end = start, end
    merged.append((cur_start, cur_end))
    return merged


def total_duration(intervals: Iterable[Interval]) -> int:
    """Sum of ``end - start`` for an already merged interval set."""
    return sum(end - start for start, end in intervals)

