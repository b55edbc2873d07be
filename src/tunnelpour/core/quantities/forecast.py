"""
Forecast engine.

Extrapolates the project-wide concrete requirement from the full-profile
(gantry) pours logged so far.
"""

import logging
from typing import Iterable, Optional

from tunnelpour.core.config import Settings, settings as default_settings
from tunnelpour.core.quantities.design_index import ChainageDesignIndex
from tunnelpour.core.quantities.intervals import merge_ranges
from tunnelpour.models.batch import BatchEntry
from tunnelpour.models.quantities import ForecastSummary
from tunnelpour.models.tunnel import StepKind
from tunnelpour.utils.logging import log_performance

logger = logging.getLogger(__name__)


class ForecastEngine:
    """
    Project completion forecast from partial progress.

    Completion is measured over GANTRY entries only, since a range counts
    as done once the arch closes the full profile. The observed
    actual/design ratio over that coverage is applied to the remaining
    design scope, within configured bounds.
    """

    def __init__(
        self,
        design_index: Optional[ChainageDesignIndex] = None,
        config: Optional[Settings] = None,
    ) -> None:
        """
        Initialize the forecast engine.

        Args:
            design_index: Design lookup (reference alignment if omitted)
            config: Engine settings (global settings if omitted)
        """
        self.config = config or default_settings
        self.design_index = design_index or ChainageDesignIndex.default(config=self.config)

    def clamp_rate(self, rate: float) -> float:
        """Limit a consumption rate to the configured forecast bounds."""
        return max(self.config.min_overbreak_rate, min(rate, self.config.max_overbreak_rate))

    @log_performance(log_level=logging.DEBUG)
    def forecast(
        self,
        entries: Iterable[BatchEntry],
        total_project_design_volume: Optional[float] = None,
        total_alignment_length: Optional[float] = None,
    ) -> ForecastSummary:
        """
        Forecast the concrete needed to finish the tunnel.

        Args:
            entries: Logged entries of any step
            total_project_design_volume: Full design scope in m³ (design
                index total if omitted)
            total_alignment_length: Alignment length in m (configured
                tunnel length if omitted)

        Returns:
            ForecastSummary for this snapshot of entries
        """
        snapshot = tuple(entries)
        scope = (
            total_project_design_volume
            if total_project_design_volume is not None
            else self.design_index.total_design_volume(StepKind.SUM)
        )
        alignment_length = (
            total_alignment_length
            if total_alignment_length is not None
            else self.config.total_tunnel_length
        )

        gantry = [e for e in snapshot if e.step == StepKind.GANTRY]
        merged = merge_ranges(gantry)

        completed_design = sum(
            self.design_index.design_volume(r.start, r.end, StepKind.SUM) for r in merged
        )
        completed_actual = sum(e.total_actual for e in gantry)
        remaining_design = max(0.0, scope - completed_design)

        if completed_design > 0:
            rate = completed_actual / completed_design
        else:
            rate = self.config.default_overbreak_rate

        safe_rate = self.clamp_rate(rate)
        if safe_rate != rate:
            logger.info(f"Overbreak rate {rate:.3f} clamped to {safe_rate:.3f} for forecast")

        forecast_to_complete = remaining_design * safe_rate
        covered = sum(r.length for r in merged)

        summary = ForecastSummary(
            total_project_scope=scope,
            completed_design=completed_design,
            completed_actual=completed_actual,
            remaining_length=max(0.0, alignment_length - covered),
            remaining_design=remaining_design,
            current_overbreak_rate=rate,
            forecast_to_complete=forecast_to_complete,
            projected_grand_total=completed_actual + forecast_to_complete,
        )

        logger.info(
            f"Forecast from {len(gantry)} gantry entries: "
            f"{covered:.1f} m complete, rate {rate:.3f}, "
            f"projected total {summary.projected_grand_total:.1f} m³"
        )
        return summary
