"""
Data models for the tunnel alignment and its reference data.

This module defines the geological chainage map, the per-rock-class design
areas and the excavation survey samples the quantity engine reads from.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class RockClass(str, Enum):
    """Geological rock classes along the alignment."""

    III = "III"
    IV = "IV"
    VA = "VA"
    VB = "VB"


class StepKind(str, Enum):
    """
    Construction stages of the concrete lining.

    INVERT, KICKER and GANTRY are poured and logged independently. SUM is
    the derived full profile (all three stages together) and is only used
    for design lookups; it is never logged.
    """

    INVERT = "Invert"
    KICKER = "Kicker"
    GANTRY = "Gantry"
    SUM = "Total Sum"

    @property
    def is_loggable(self) -> bool:
        """Whether entries can be logged against this step."""
        return self is not StepKind.SUM

    @property
    def closes_profile(self) -> bool:
        """Whether pouring this step completes the full lining profile."""
        return self is StepKind.GANTRY


LOGGABLE_STEPS: Tuple[StepKind, ...] = (StepKind.INVERT, StepKind.KICKER, StepKind.GANTRY)


@dataclass(frozen=True)
class RockClassAreas:
    """
    Design concrete areas per meter of tunnel for one rock class.

    Attributes:
        invert: Invert area (m²), i.e. m³ per meter
        kicker: Kicker area (m²)
        gantry: Gantry (arch) area (m²)
        total: Full profile area (m²), invert + kicker + gantry
    """

    invert: float
    kicker: float
    gantry: float
    total: float

    @classmethod
    def from_stages(cls, invert: float, kicker: float, gantry: float) -> "RockClassAreas":
        """Build areas with the total derived from the three stages."""
        return cls(invert=invert, kicker=kicker, gantry=gantry, total=invert + kicker + gantry)

    def for_step(self, step: StepKind) -> float:
        """
        Get the unit area used for a construction step.

        Args:
            step: Construction step, SUM for the full profile

        Returns:
            Area in m² (m³ per meter of tunnel)
        """
        return {
            StepKind.INVERT: self.invert,
            StepKind.KICKER: self.kicker,
            StepKind.GANTRY: self.gantry,
            StepKind.SUM: self.total,
        }[step]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "invert": self.invert,
            "kicker": self.kicker,
            "gantry": self.gantry,
            "total": self.total,
        }


@dataclass(frozen=True)
class ChainageSegment:
    """
    A stretch of the alignment with a single rock class.

    Attributes:
        start: Start chainage in meters (``from`` in the design tables)
        end: End chainage in meters
        rock_class: Rock class of the stretch
    """

    start: float
    end: float
    rock_class: RockClass

    @property
    def length(self) -> float:
        """Segment length in meters."""
        return self.end - self.start

    def overlap(self, start: float, end: float) -> float:
        """
        Length of overlap with ``[start, end]``.

        Args:
            start: Range start (must be <= end)
            end: Range end

        Returns:
            Overlap length in meters, 0.0 if the ranges do not overlap
        """
        return max(0.0, min(end, self.end) - max(start, self.start))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "from": self.start,
            "to": self.end,
            "rock_class": self.rock_class.value,
        }


@dataclass(frozen=True)
class ExcavationPoint:
    """
    One cross-section of the original excavation survey.

    Attributes:
        chainage: Chainage in meters
        area: Excavated cross-sectional area (m²)
        rock_class: Rock class recorded with the survey, if any
    """

    chainage: float
    area: float
    rock_class: Optional[RockClass] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "chainage": self.chainage,
            "area": self.area,
            "rock_class": self.rock_class.value if self.rock_class else None,
        }


@dataclass(frozen=True)
class Interval:
    """
    A chainage range normalized so that ``start <= end``.

    Attributes:
        start: Lower chainage in meters
        end: Upper chainage in meters
    """

    start: float
    end: float

    def __post_init__(self) -> None:
        if self.start > self.end:
            start, end = self.end, self.start
            object.__setattr__(self, "start", start)
            object.__setattr__(self, "end", end)

    @property
    def length(self) -> float:
        """Interval length in meters."""
        return self.end - self.start

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"start": self.start, "end": self.end}
