"""
Concrete quantity engine.

This module provides tools for:
- Design volume lookup from the geological chainage map
- Excavation profile resolution with re-survey overrides
- Fill volume integration with shotcrete and masonry deductions
- Prior invert/kicker apportionment across mismatched ranges
- Coverage merging and completion forecasting
"""

from tunnelpour.core.quantities.analysis import (
    consumption_profile,
    progress_totals,
    projection_curve,
)
from tunnelpour.core.quantities.apportion import prior_volume
from tunnelpour.core.quantities.design_index import ChainageDesignIndex
from tunnelpour.core.quantities.entries import (
    EntryQuantityCalculator,
    design_step_for,
    resolve_masonry_deduction,
)
from tunnelpour.core.quantities.forecast import ForecastEngine
from tunnelpour.core.quantities.intervals import coverage, merge_ranges, union_length
from tunnelpour.core.quantities.profile import ExcavationProfileResolver, SampleSeries
from tunnelpour.core.quantities.volume_integrator import VolumeIntegrator

__all__ = [
    "ChainageDesignIndex",
    "ExcavationProfileResolver",
    "SampleSeries",
    "VolumeIntegrator",
    "prior_volume",
    "merge_ranges",
    "union_length",
    "coverage",
    "ForecastEngine",
    "EntryQuantityCalculator",
    "design_step_for",
    "resolve_masonry_deduction",
    "progress_totals",
    "consumption_profile",
    "projection_curve",
]
