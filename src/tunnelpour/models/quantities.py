"""
Result models for quantity calculations.

Every result is a frozen dataclass: the engine hands back a fresh snapshot
for each call and never keeps references into caller data.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from tunnelpour.models.tunnel import ChainageSegment


@dataclass(frozen=True)
class ProfileSample:
    """
    Excavated area resolved at one chainage.

    Attributes:
        area: Excavated cross-sectional area (m²)
        is_resurveyed: True if the area came from re-survey data
    """

    area: float
    is_resurveyed: bool


@dataclass(frozen=True)
class FillVolume:
    """
    Concrete fill volume over a chainage range.

    Attributes:
        gross: Gross fill volume (m³) integrated from the excavation profile
        shotcrete_deduction: Shotcrete volume to deduct (m³)
    """

    gross: float
    shotcrete_deduction: float

    def net(self, masonry_deduction: float = 0.0) -> float:
        """
        Net survey volume after deductions.

        Args:
            masonry_deduction: Stone masonry allowance (m³); negative values
                are treated as zero

        Returns:
            Net volume in m³, never negative
        """
        masonry = max(0.0, masonry_deduction)
        return max(0.0, self.gross - self.shotcrete_deduction - masonry)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "gross": float(self.gross),
            "shotcrete_deduction": float(self.shotcrete_deduction),
        }


@dataclass(frozen=True)
class FillSlice:
    """
    One trapezoid of the fill volume integration.

    Attributes:
        start: Slice start chainage
        end: Slice end chainage
        start_area: Excavated area at start (m²)
        end_area: Excavated area at end (m²)
        start_fill: Fill area at start (m²)
        end_fill: Fill area at end (m²)
        volume: Gross slice volume (m³)
        shotcrete_deduction: Shotcrete deducted for the slice (m³)
        is_resurveyed: Both ends came from re-survey data
    """

    start: float
    end: float
    start_area: float
    end_area: float
    start_fill: float
    end_fill: float
    volume: float
    shotcrete_deduction: float
    is_resurveyed: bool

    @property
    def length(self) -> float:
        """Slice length in meters."""
        return self.end - self.start

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "start": self.start,
            "end": self.end,
            "start_area": self.start_area,
            "end_area": self.end_area,
            "start_fill": self.start_fill,
            "end_fill": self.end_fill,
            "volume": self.volume,
            "shotcrete_deduction": self.shotcrete_deduction,
            "is_resurveyed": self.is_resurveyed,
        }


@dataclass(frozen=True)
class DesignContribution:
    """
    Design volume contributed by one chainage segment.

    Attributes:
        segment: Segment of the chainage map
        overlap_length: Length of the queried range inside the segment
        unit_area: Design area for the queried step (m²)
        volume: overlap_length × unit_area (m³)
    """

    segment: ChainageSegment
    overlap_length: float
    unit_area: float
    volume: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "segment": self.segment.to_dict(),
            "overlap_length": self.overlap_length,
            "unit_area": self.unit_area,
            "volume": self.volume,
        }


@dataclass(frozen=True)
class ForecastSummary:
    """
    Project-level projection derived from the current entry set.

    Attributes:
        total_project_scope: Design volume of the whole alignment (m³)
        completed_design: Design volume of the completed ranges (m³)
        completed_actual: Concrete poured in the completed ranges (m³)
        remaining_length: Alignment length not yet completed (m)
        remaining_design: total_project_scope - completed_design, floored at 0
        current_overbreak_rate: completed_actual / completed_design, or the
            default rate before any data exists
        forecast_to_complete: Concrete still needed (m³)
        projected_grand_total: completed_actual + forecast_to_complete
    """

    total_project_scope: float
    completed_design: float
    completed_actual: float
    remaining_length: float
    remaining_design: float
    current_overbreak_rate: float
    forecast_to_complete: float
    projected_grand_total: float

    @property
    def overbreak_percent(self) -> float:
        """Over-consumption against design as a percentage."""
        return (self.current_overbreak_rate - 1.0) * 100.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_project_scope": float(self.total_project_scope),
            "completed_design": float(self.completed_design),
            "completed_actual": float(self.completed_actual),
            "remaining_length": float(self.remaining_length),
            "remaining_design": float(self.remaining_design),
            "current_overbreak_rate": float(self.current_overbreak_rate),
            "forecast_to_complete": float(self.forecast_to_complete),
            "projected_grand_total": float(self.projected_grand_total),
        }


@dataclass(frozen=True)
class ProgressTotals:
    """
    Headline totals over the logged entries.

    Attributes:
        actual: Concrete poured (gantry cumulative, or all raw actuals when
            nothing has closed the profile yet)
        designed: Sum of stored design quantities
        survey: Sum of net survey quantities
        actual_for_survey: Gantry cumulative actual, comparable to survey
        progress_length: Unique length with the full profile closed (m)
    """

    actual: float
    designed: float
    survey: float
    actual_for_survey: float
    progress_length: float

    @property
    def survey_variance(self) -> float:
        """Poured minus surveyed volume (m³)."""
        return self.actual_for_survey - self.survey

    @property
    def survey_variance_percent(self) -> float:
        """Survey variance as a percentage of surveyed volume."""
        if self.survey <= 0:
            return 0.0
        return self.survey_variance / self.survey * 100.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "actual": float(self.actual),
            "designed": float(self.designed),
            "survey": float(self.survey),
            "actual_for_survey": float(self.actual_for_survey),
            "progress_length": float(self.progress_length),
            "survey_variance": float(self.survey_variance),
            "survey_variance_percent": float(self.survey_variance_percent),
        }


@dataclass(frozen=True)
class ConsumptionPoint:
    """
    Design versus actual consumption for one full-profile entry.

    Attributes:
        chainage: Midpoint chainage of the entry
        length: Entry length (m)
        design_rate: Design volume per meter (m³/m)
        actual_rate: Poured volume per meter (m³/m)
        over_consumption_pct: (actual_rate - design_rate) / design_rate × 100
    """

    chainage: float
    length: float
    design_rate: float
    actual_rate: float
    over_consumption_pct: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "chainage": self.chainage,
            "length": self.length,
            "design_rate": self.design_rate,
            "actual_rate": self.actual_rate,
            "over_consumption_pct": self.over_consumption_pct,
        }


@dataclass(frozen=True)
class ProjectionPoint:
    """
    One point of the cumulative consumption curve.

    Attributes:
        length: Cumulative length completed (m)
        cumulative_actual: Cumulative poured volume, None for the forecast point
        cumulative_design: Cumulative design volume (m³)
        projected: Projected volume at this length (m³)
        label: Chainage range or marker for the point
    """

    length: float
    cumulative_actual: Optional[float]
    cumulative_design: float
    projected: float
    label: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "length": self.length,
            "cumulative_actual": self.cumulative_actual,
            "cumulative_design": self.cumulative_design,
            "projected": self.projected,
            "label": self.label,
        }
