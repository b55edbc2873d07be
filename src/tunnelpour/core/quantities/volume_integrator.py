"""
Volume integrator for concrete fill.

Integrates the excavation profile between two chainages into the gross
concrete fill volume, and works out the shotcrete deduction owed over the
same range.
"""

import logging
from typing import List, Optional

import numpy as np

from tunnelpour.core.chainage import format_range
from tunnelpour.core.config import Settings, settings as default_settings
from tunnelpour.core.quantities.profile import ExcavationProfileResolver, OverrideInput
from tunnelpour.models.quantities import FillSlice, FillVolume
from tunnelpour.utils.logging import PerformanceTimer

logger = logging.getLogger(__name__)


class VolumeIntegrator:
    """
    Trapezoidal integration of the concrete fill area along the alignment.

    The fill area at a section is the excavated area minus the finished
    inner area of the lining, floored at zero. Breakpoints are placed at
    every survey section inside the range so the piecewise-linear profile
    is integrated exactly.

    Shotcrete is deducted on every slice unless both of its ends come from
    re-survey data; re-survey areas are taken to be measured to the
    shotcrete surface already.
    """

    def __init__(
        self,
        resolver: Optional[ExcavationProfileResolver] = None,
        config: Optional[Settings] = None,
    ) -> None:
        """
        Initialize the integrator.

        Args:
            resolver: Profile resolver (reference survey if omitted)
            config: Engine settings (global settings if omitted)
        """
        self.config = config or default_settings
        self.resolver = resolver or ExcavationProfileResolver.default(config=self.config)

    def _fill_area(self, area: float) -> float:
        return max(0.0, area - self.config.finished_inner_area)

    def slices(
        self,
        from_chainage: float,
        to_chainage: float,
        overrides: OverrideInput = None,
    ) -> List[FillSlice]:
        """
        Trapezoid slices making up the fill volume of a range.

        Args:
            from_chainage: Range start (either order)
            to_chainage: Range end
            overrides: Re-survey points (raw or prepared)

        Returns:
            Slices in ascending chainage order; empty for a zero-length range
        """
        start = min(from_chainage, to_chainage)
        end = max(from_chainage, to_chainage)
        if start == end:
            return []

        series = self.resolver.prepare_overrides(overrides)
        breakpoints = np.unique(
            np.concatenate(
                (
                    np.array([start, end], dtype=np.float64),
                    self.resolver.original.inside(start, end),
                    series.inside(start, end),
                )
            )
        )

        result = []
        previous = self.resolver.profile_at(float(breakpoints[0]), series)
        for c1, c2 in zip(breakpoints[:-1], breakpoints[1:]):
            current = self.resolver.profile_at(float(c2), series)
            length = float(c2 - c1)

            fill1 = self._fill_area(previous.area)
            fill2 = self._fill_area(current.area)
            resurveyed = previous.is_resurveyed and current.is_resurveyed

            result.append(
                FillSlice(
                    start=float(c1),
                    end=float(c2),
                    start_area=previous.area,
                    end_area=current.area,
                    start_fill=fill1,
                    end_fill=fill2,
                    volume=(fill1 + fill2) / 2.0 * length,
                    shotcrete_deduction=(
                        0.0 if resurveyed else length * self.config.shotcrete_deduction
                    ),
                    is_resurveyed=resurveyed,
                )
            )
            previous = current

        return result

    def fill_volume(
        self,
        from_chainage: float,
        to_chainage: float,
        overrides: OverrideInput = None,
    ) -> FillVolume:
        """
        Gross fill volume and shotcrete deduction of a range.

        Args:
            from_chainage: Range start (either order)
            to_chainage: Range end
            overrides: Re-survey points (raw or prepared)

        Returns:
            FillVolume; both values are 0.0 for a zero-length range
        """
        with PerformanceTimer(
            f"fill_volume {format_range(min(from_chainage, to_chainage), max(from_chainage, to_chainage))}",
            log_level=logging.DEBUG,
        ):
            gross = 0.0
            shotcrete = 0.0
            for fill_slice in self.slices(from_chainage, to_chainage, overrides):
                gross += fill_slice.volume
                shotcrete += fill_slice.shotcrete_deduction

        logger.debug(f"Fill volume: gross={gross:.3f} m³, shotcrete={shotcrete:.3f} m³")
        return FillVolume(gross=gross, shotcrete_deduction=shotcrete)

    def net_survey_volume(
        self,
        from_chainage: float,
        to_chainage: float,
        overrides: OverrideInput = None,
        masonry_deduction: float = 0.0,
    ) -> float:
        """
        Net survey volume: gross fill less shotcrete and masonry deductions.

        Args:
            from_chainage: Range start (either order)
            to_chainage: Range end
            overrides: Re-survey points (raw or prepared)
            masonry_deduction: Stone masonry allowance in m³

        Returns:
            Net volume in m³, never negative
        """
        return self.fill_volume(from_chainage, to_chainage, overrides).net(masonry_deduction)
