"""
Chainage design index.

Looks up theoretical design concrete volumes for any chainage range from
the geological chainage map and the per-rock-class design areas.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from tunnelpour.core.config import Settings, settings as default_settings
from tunnelpour.core.errors import DatasetError
from tunnelpour.core.quantities.reference import CHAINAGE_MAP, ROCK_CLASS_DESIGN_AREAS
from tunnelpour.models.quantities import DesignContribution
from tunnelpour.models.tunnel import ChainageSegment, RockClass, RockClassAreas, StepKind

logger = logging.getLogger(__name__)


class ChainageDesignIndex:
    """
    Design volume lookup over a partitioned alignment.

    The segments are expected to tile the alignment without gaps or
    overlaps. Only ``start < end`` and the presence of design areas are
    checked here; a map with gaps simply yields no volume over the gap.
    """

    def __init__(
        self,
        segments: Sequence[ChainageSegment],
        areas: Mapping[RockClass, RockClassAreas],
        config: Optional[Settings] = None,
    ) -> None:
        """
        Initialize the design index.

        Args:
            segments: Chainage map segments
            areas: Design areas for every rock class used by the segments
            config: Engine settings (global settings if omitted)

        Raises:
            DatasetError: If the map is empty, a segment has start >= end,
                or a rock class has no or negative design areas
        """
        self.config = config or default_settings

        if not segments:
            raise DatasetError("Chainage map has no segments", dataset="chainage_map")

        for segment in segments:
            if segment.start >= segment.end:
                raise DatasetError(
                    f"Segment {segment.start}-{segment.end} has start >= end",
                    dataset="chainage_map",
                    details={"segment": segment.to_dict()},
                )
            if segment.rock_class not in areas:
                raise DatasetError(
                    f"No design areas for rock class {segment.rock_class.value}",
                    dataset="rock_class_areas",
                )

        for rock_class, rc_areas in areas.items():
            if min(rc_areas.invert, rc_areas.kicker, rc_areas.gantry, rc_areas.total) < 0:
                raise DatasetError(
                    f"Negative design area for rock class {rock_class.value}",
                    dataset="rock_class_areas",
                    details={"areas": rc_areas.to_dict()},
                )

        self.segments: tuple[ChainageSegment, ...] = tuple(
            sorted(segments, key=lambda s: s.start)
        )
        self.areas: Dict[RockClass, RockClassAreas] = dict(areas)

        self._starts = np.array([s.start for s in self.segments], dtype=np.float64)
        self._ends = np.array([s.end for s in self.segments], dtype=np.float64)
        self._unit_areas: Dict[StepKind, NDArray[np.float64]] = {
            step: np.array(
                [self.areas[s.rock_class].for_step(step) for s in self.segments],
                dtype=np.float64,
            )
            for step in StepKind
        }

        logger.debug(
            f"Initialized design index: {len(self.segments)} segments, "
            f"{self.start:.1f}-{self.end:.1f} m"
        )

    @classmethod
    def default(cls, config: Optional[Settings] = None) -> "ChainageDesignIndex":
        """
        Build the index from the packaged reference alignment.

        Args:
            config: Engine settings (global settings if omitted)

        Returns:
            ChainageDesignIndex over the reference chainage map
        """
        return cls(CHAINAGE_MAP, ROCK_CLASS_DESIGN_AREAS, config=config)

    @property
    def start(self) -> float:
        """First chainage covered by the map."""
        return float(self._starts[0])

    @property
    def end(self) -> float:
        """Last chainage covered by the map."""
        return float(self._ends[-1])

    @property
    def total_length(self) -> float:
        """Length of the alignment covered by the map."""
        return self.end - self.start

    def design_volume(self, from_chainage: float, to_chainage: float, step: StepKind) -> float:
        """
        Design concrete volume of a chainage range.

        For a full-profile comparison pass ``StepKind.SUM``; ``GANTRY``
        returns the gantry stage only.

        Args:
            from_chainage: Range start (either order)
            to_chainage: Range end
            step: Lining stage, or SUM for the full profile

        Returns:
            Volume in m³, rounded to the configured precision
        """
        start = min(from_chainage, to_chainage)
        end = max(from_chainage, to_chainage)

        overlaps = np.minimum(end, self._ends) - np.maximum(start, self._starts)
        overlaps = np.where(overlaps > 0, overlaps, 0.0)
        total = float(np.dot(overlaps, self._unit_areas[step]))

        return round(total, self.config.design_precision)

    def breakdown(
        self, from_chainage: float, to_chainage: float, step: StepKind
    ) -> List[DesignContribution]:
        """
        Per-segment contributions behind ``design_volume``.

        Args:
            from_chainage: Range start (either order)
            to_chainage: Range end
            step: Lining stage, or SUM for the full profile

        Returns:
            Contributions of every segment overlapping the range, in chainage order
        """
        start = min(from_chainage, to_chainage)
        end = max(from_chainage, to_chainage)

        contributions = []
        for segment in self.segments:
            overlap = segment.overlap(start, end)
            if overlap <= 0:
                continue
            unit_area = self.areas[segment.rock_class].for_step(step)
            contributions.append(
                DesignContribution(
                    segment=segment,
                    overlap_length=overlap,
                    unit_area=unit_area,
                    volume=overlap * unit_area,
                )
            )
        return contributions

    def total_design_volume(self, step: StepKind = StepKind.SUM) -> float:
        """
        Design volume of the whole alignment.

        Args:
            step: Lining stage, SUM (default) for the full profile scope

        Returns:
            Volume in m³, rounded to the configured precision
        """
        total = float(np.dot(self._ends - self._starts, self._unit_areas[step]))
        return round(total, self.config.design_precision)

    def rock_class_at(self, chainage: float) -> Optional[RockClass]:
        """
        Rock class at a chainage.

        Segments are half-open ``[start, end)`` except the last one, which
        includes its end.

        Args:
            chainage: Chainage in meters

        Returns:
            RockClass, or None outside the map
        """
        for segment in self.segments:
            if segment.start <= chainage < segment.end:
                return segment.rock_class
        last = self.segments[-1]
        if chainage == last.end:
            return last.rock_class
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "segments": [s.to_dict() for s in self.segments],
            "areas": {rc.value: a.to_dict() for rc, a in self.areas.items()},
            "total_length": self.total_length,
        }
