"""
Progress analysis over the logged entries.

Headline totals, the per-pour consumption profile along the alignment and
the cumulative projection curve towards project completion.
"""

import logging
from typing import Iterable, List, Optional

from tunnelpour.core.chainage import format_range
from tunnelpour.core.config import Settings, settings as default_settings
from tunnelpour.core.quantities.design_index import ChainageDesignIndex
from tunnelpour.core.quantities.intervals import union_length
from tunnelpour.models.batch import BatchEntry
from tunnelpour.models.quantities import (
    ConsumptionPoint,
    ForecastSummary,
    ProgressTotals,
    ProjectionPoint,
)
from tunnelpour.models.tunnel import StepKind

logger = logging.getLogger(__name__)

START_LABEL = "Start"
COMPLETION_LABEL = "Project Completion"


def _gantry_entries(entries: Iterable[BatchEntry]) -> List[BatchEntry]:
    return [e for e in entries if e.step == StepKind.GANTRY]


def progress_totals(entries: Iterable[BatchEntry]) -> ProgressTotals:
    """
    Headline totals for the dashboard.

    Args:
        entries: Logged entries of any step

    Returns:
        ProgressTotals for this snapshot of entries
    """
    snapshot = tuple(entries)
    gantry = _gantry_entries(snapshot)

    if gantry:
        actual = sum(e.total_actual for e in gantry)
    else:
        actual = sum(e.actual_qty for e in snapshot)

    return ProgressTotals(
        actual=actual,
        designed=sum(e.designed_qty for e in snapshot),
        survey=sum(e.survey_qty for e in snapshot),
        actual_for_survey=sum(e.cumulative_actual_qty or 0.0 for e in gantry),
        progress_length=union_length(gantry),
    )


def consumption_profile(
    entries: Iterable[BatchEntry],
    design_index: Optional[ChainageDesignIndex] = None,
    config: Optional[Settings] = None,
) -> List[ConsumptionPoint]:
    """
    Design and actual consumption per meter for each full-profile pour.

    Args:
        entries: Logged entries; only GANTRY entries are profiled
        design_index: Design lookup (reference alignment if omitted)
        config: Engine settings for the reference lookup (global settings if omitted)

    Returns:
        Points sorted by midpoint chainage
    """
    index = design_index or ChainageDesignIndex.default(config=config)

    points = []
    for entry in _gantry_entries(entries):
        length = entry.length
        design = index.design_volume(entry.from_chainage, entry.to_chainage, StepKind.SUM)

        design_rate = design / length if length > 0 else 0.0
        actual_rate = entry.total_actual / length if length > 0 else 0.0
        over = (actual_rate - design_rate) / design_rate * 100.0 if design_rate > 0 else 0.0

        points.append(
            ConsumptionPoint(
                chainage=(entry.from_chainage + entry.to_chainage) / 2.0,
                length=length,
                design_rate=design_rate,
                actual_rate=actual_rate,
                over_consumption_pct=over,
            )
        )

    points.sort(key=lambda p: p.chainage)
    return points


def projection_curve(
    entries: Iterable[BatchEntry],
    summary: ForecastSummary,
    design_index: Optional[ChainageDesignIndex] = None,
    total_length: Optional[float] = None,
    config: Optional[Settings] = None,
) -> List[ProjectionPoint]:
    """
    Cumulative volume against completed length, ending at the forecast.

    Gantry entries are accumulated in pour-date order. The curve starts at
    zero and ends with a completion point at the full alignment length
    carrying the design scope and the projected grand total.

    Args:
        entries: Logged entries; only GANTRY entries contribute
        summary: Forecast for the same entries
        design_index: Design lookup (reference alignment if omitted)
        total_length: Alignment length (configured tunnel length if omitted)
        config: Engine settings (global settings if omitted)

    Returns:
        Points from start to project completion
    """
    index = design_index or ChainageDesignIndex.default(config=config)
    if total_length is None:
        total_length = (config or default_settings).total_tunnel_length

    gantry = sorted(_gantry_entries(entries), key=lambda e: e.date)

    points = [
        ProjectionPoint(
            length=0.0,
            cumulative_actual=0.0,
            cumulative_design=0.0,
            projected=0.0,
            label=START_LABEL,
        )
    ]

    running_length = running_actual = running_design = 0.0
    for entry in gantry:
        running_length += entry.length
        running_actual += entry.total_actual
        running_design += index.design_volume(
            entry.from_chainage, entry.to_chainage, StepKind.SUM
        )
        points.append(
            ProjectionPoint(
                length=running_length,
                cumulative_actual=running_actual,
                cumulative_design=running_design,
                projected=running_actual,
                label=format_range(entry.from_chainage, entry.to_chainage),
            )
        )

    points.append(
        ProjectionPoint(
            length=total_length,
            cumulative_actual=None,
            cumulative_design=summary.total_project_scope,
            projected=summary.projected_grand_total,
            label=COMPLETION_LABEL,
        )
    )

    logger.debug(f"Projection curve built from {len(gantry)} gantry entries")
    return points
