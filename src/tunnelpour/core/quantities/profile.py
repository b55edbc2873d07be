"""
Excavation profile resolver.

Answers "what is the excavated cross-sectional area at chainage X" by
interpolating the original excavation survey, with re-survey points taking
precedence inside their own span.
"""

import datetime as dt
import logging
from typing import Iterable, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from tunnelpour.core.config import Settings, settings as default_settings
from tunnelpour.core.errors import DatasetError
from tunnelpour.core.quantities.reference import EXCAVATION_PROFILE
from tunnelpour.models.batch import SurveyOverridePoint
from tunnelpour.models.quantities import ProfileSample
from tunnelpour.models.tunnel import ExcavationPoint

logger = logging.getLogger(__name__)

_EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)


def _added_at(point: object) -> dt.datetime:
    added = getattr(point, "date_added", None)
    if added is None:
        return _EPOCH
    if added.tzinfo is None:
        return added.replace(tzinfo=dt.timezone.utc)
    return added


class SampleSeries:
    """
    Ascending chainage/area samples with exact-match and linear lookup.

    Attributes:
        chainages: Sample chainages, strictly ascending
        areas: Excavated areas at those chainages
    """

    def __init__(self, chainages: NDArray[np.float64], areas: NDArray[np.float64]) -> None:
        self.chainages = chainages
        self.areas = areas
        self.chainages.setflags(write=False)
        self.areas.setflags(write=False)

    @classmethod
    def from_overrides(
        cls,
        points: Iterable[Union[SurveyOverridePoint, ExcavationPoint]],
        tolerance: float,
    ) -> "SampleSeries":
        """
        Build a series from re-survey points in any order.

        Points closer together than ``tolerance`` are the same section
        measured again; the most recently added one is kept.

        Args:
            points: Override points
            tolerance: Chainage distance under which points coincide

        Returns:
            SampleSeries sorted by chainage
        """
        ordered = sorted(points, key=lambda p: p.chainage)

        kept: list = []
        for point in ordered:
            if kept and point.chainage - kept[-1].chainage < tolerance:
                if _added_at(point) >= _added_at(kept[-1]):
                    kept[-1] = point
                continue
            kept.append(point)

        if len(kept) < len(ordered):
            logger.debug(f"Collapsed {len(ordered) - len(kept)} duplicate re-survey points")

        return cls(
            np.array([p.chainage for p in kept], dtype=np.float64),
            np.array([p.area for p in kept], dtype=np.float64),
        )

    def __len__(self) -> int:
        return int(self.chainages.size)

    @property
    def start(self) -> float:
        """First sample chainage."""
        return float(self.chainages[0])

    @property
    def end(self) -> float:
        """Last sample chainage."""
        return float(self.chainages[-1])

    def interpolate(self, chainage: float, tolerance: float) -> Optional[float]:
        """
        Area at a chainage inside the series span.

        Args:
            chainage: Query chainage
            tolerance: Distance under which a sample counts as an exact match

        Returns:
            Stored area on an exact match, the linearly interpolated area
            between bracketing samples otherwise, or None outside the span
        """
        if len(self) == 0:
            return None
        if chainage < self.chainages[0] or chainage > self.chainages[-1]:
            return None

        nearest = int(np.argmin(np.abs(self.chainages - chainage)))
        if abs(self.chainages[nearest] - chainage) < tolerance:
            return float(self.areas[nearest])

        return float(np.interp(chainage, self.chainages, self.areas))

    def inside(self, start: float, end: float) -> NDArray[np.float64]:
        """Sample chainages strictly between ``start`` and ``end``."""
        mask = (self.chainages > start) & (self.chainages < end)
        return self.chainages[mask]


OverrideInput = Union[SampleSeries, Sequence[Union[SurveyOverridePoint, ExcavationPoint]], None]


class ExcavationProfileResolver:
    """
    Resolve excavated areas from the original survey and re-survey points.

    Re-survey points are only used where the query chainage lies within
    their own min/max span. They are never extrapolated, so a sparse
    patch of re-survey data cannot change the profile elsewhere.
    """

    def __init__(
        self,
        points: Sequence[ExcavationPoint],
        config: Optional[Settings] = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            points: Original excavation survey, ascending by chainage
            config: Engine settings (global settings if omitted)

        Raises:
            DatasetError: If the dataset is empty or not strictly ascending
        """
        self.config = config or default_settings

        if not points:
            raise DatasetError("Excavation dataset is empty", dataset="excavation_profile")

        chainages = np.array([p.chainage for p in points], dtype=np.float64)
        if chainages.size > 1 and np.any(np.diff(chainages) <= 0):
            raise DatasetError(
                "Excavation dataset chainages must be strictly ascending",
                dataset="excavation_profile",
            )

        self.original = SampleSeries(
            chainages, np.array([p.area for p in points], dtype=np.float64)
        )

        logger.debug(
            f"Initialized profile resolver: {len(self.original)} sections, "
            f"{self.original.start:.1f}-{self.original.end:.1f} m"
        )

    @classmethod
    def default(cls, config: Optional[Settings] = None) -> "ExcavationProfileResolver":
        """
        Build the resolver from the packaged reference excavation survey.

        Args:
            config: Engine settings (global settings if omitted)

        Returns:
            ExcavationProfileResolver over the reference survey
        """
        return cls(EXCAVATION_PROFILE, config=config)

    def prepare_overrides(self, overrides: OverrideInput) -> SampleSeries:
        """
        Sort and deduplicate re-survey points once for repeated lookups.

        Args:
            overrides: Raw override points, an already prepared series, or None

        Returns:
            SampleSeries of the overrides
        """
        if isinstance(overrides, SampleSeries):
            return overrides
        return SampleSeries.from_overrides(overrides or (), self.config.chainage_tolerance)

    def profile_at(self, chainage: float, overrides: OverrideInput = None) -> ProfileSample:
        """
        Excavated area at a chainage.

        Args:
            chainage: Query chainage in meters
            overrides: Re-survey points (raw or prepared)

        Returns:
            ProfileSample with the area and whether it came from re-survey data
        """
        tolerance = self.config.chainage_tolerance
        series = self.prepare_overrides(overrides)

        if len(series) > 1:
            area = series.interpolate(chainage, tolerance)
            if area is not None:
                return ProfileSample(area=area, is_resurveyed=True)

        area = self.original.interpolate(chainage, tolerance)
        if area is not None:
            return ProfileSample(area=area, is_resurveyed=False)

        # Outside the surveyed alignment: clamp to the nearest end
        if chainage < self.original.start:
            return ProfileSample(area=float(self.original.areas[0]), is_resurveyed=False)
        return ProfileSample(area=float(self.original.areas[-1]), is_resurveyed=False)
