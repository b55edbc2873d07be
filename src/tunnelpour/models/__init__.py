"""
Data models and schemas.
"""

from .tunnel import (
    LOGGABLE_STEPS,
    ChainageSegment,
    ExcavationPoint,
    Interval,
    RockClass,
    RockClassAreas,
    StepKind,
)
from .batch import BatchEntry, EntryDraft, SurveyOverridePoint
from .quantities import (
    ConsumptionPoint,
    DesignContribution,
    FillSlice,
    FillVolume,
    ForecastSummary,
    ProfileSample,
    ProgressTotals,
    ProjectionPoint,
)

__all__ = [
    # Alignment reference data
    "RockClass",
    "StepKind",
    "LOGGABLE_STEPS",
    "RockClassAreas",
    "ChainageSegment",
    "ExcavationPoint",
    "Interval",
    # Store records
    "BatchEntry",
    "EntryDraft",
    "SurveyOverridePoint",
    # Results
    "ProfileSample",
    "FillVolume",
    "FillSlice",
    "DesignContribution",
    "ForecastSummary",
    "ProgressTotals",
    "ConsumptionPoint",
    "ProjectionPoint",
]
