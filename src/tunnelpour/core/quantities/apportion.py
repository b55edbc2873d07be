"""
Prior-volume apportionment.

A full-profile pour rarely lines up with the invert and kicker pours that
came before it. The volume those earlier pours contributed to a range is
estimated by treating each of them as spread uniformly along its own
logged length.
"""

import logging
from typing import Iterable

from tunnelpour.models.batch import BatchEntry
from tunnelpour.models.tunnel import StepKind

logger = logging.getLogger(__name__)


def prior_volume(
    target_from: float,
    target_to: float,
    step: StepKind,
    entries: Iterable[BatchEntry],
) -> float:
    """
    Volume of earlier ``step`` pours falling inside a target range.

    Each matching entry contributes ``actual_qty / entry_length`` per meter
    of overlap. Zero-length entries have no defined density and are skipped.

    Args:
        target_from: Target range start (either order)
        target_to: Target range end
        step: Earlier step to look up (e.g. INVERT or KICKER)
        entries: Logged entries; entries of other steps are ignored

    Returns:
        Apportioned volume in m³; 0.0 for a zero-length target
    """
    start = min(target_from, target_to)
    end = max(target_from, target_to)
    if end <= start:
        return 0.0

    total = 0.0
    skipped = 0
    for entry in entries:
        if entry.step != step:
            continue

        interval = entry.interval
        if interval.length <= 0:
            skipped += 1
            continue

        overlap = min(end, interval.end) - max(start, interval.start)
        if overlap > 0:
            total += entry.actual_qty / interval.length * overlap

    if skipped:
        logger.warning(f"Skipped {skipped} zero-length {step.value} entries during apportionment")

    return total
