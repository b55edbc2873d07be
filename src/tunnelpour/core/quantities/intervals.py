"""
Interval merging for chainage coverage.

Overlapping or re-logged pours must not be counted twice when measuring
how much of the tunnel has been addressed. These helpers canonicalize sets
of chainage ranges into disjoint intervals.
"""

from typing import Iterable, List, Optional, Tuple, Union

from tunnelpour.models.batch import BatchEntry
from tunnelpour.models.tunnel import Interval, StepKind

RangeLike = Union[Interval, BatchEntry, Tuple[float, float]]


def as_interval(item: RangeLike) -> Interval:
    """
    Normalize a range-like value to an Interval.

    Args:
        item: Interval, BatchEntry, or ``(a, b)`` pair in either order

    Returns:
        Interval with start <= end
    """
    if isinstance(item, Interval):
        return item
    if isinstance(item, BatchEntry):
        return item.interval
    a, b = item
    return Interval(float(a), float(b))


def merge_ranges(ranges: Iterable[RangeLike]) -> List[Interval]:
    """
    Merge overlapping ranges into disjoint intervals.

    Ranges are merged only when they genuinely overlap: a range starting
    exactly where the running interval ends starts a new interval.

    Args:
        ranges: Ranges in any order and orientation

    Returns:
        Disjoint intervals sorted by start; the inputs are not modified
    """
    intervals = sorted((as_interval(r) for r in ranges), key=lambda i: (i.start, i.end))
    if not intervals:
        return []

    merged: List[Interval] = []
    current_start, current_end = intervals[0].start, intervals[0].end
    for interval in intervals[1:]:
        if interval.start < current_end:
            current_end = max(current_end, interval.end)
        else:
            merged.append(Interval(current_start, current_end))
            current_start, current_end = interval.start, interval.end
    merged.append(Interval(current_start, current_end))

    return merged


def union_length(ranges: Iterable[RangeLike]) -> float:
    """
    Total unique length covered by a set of ranges.

    Args:
        ranges: Entries, intervals or pairs

    Returns:
        Union length in meters
    """
    return sum(interval.length for interval in merge_ranges(ranges))


def coverage(entries: Iterable[BatchEntry], step: Optional[StepKind] = None) -> List[Interval]:
    """
    Merged chainage coverage of logged entries.

    Args:
        entries: Logged entries
        step: Only count entries of this step (all steps if None)

    Returns:
        Disjoint covered intervals
    """
    return merge_ranges(e for e in entries if step is None or e.step == step)
