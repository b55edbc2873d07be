"""
Concrete Lining Forecast Demo

Demonstrates the quantity workflow on the reference alignment:
1. Log invert and kicker pours
2. Capture full-profile (gantry) pours with re-survey data
3. Summarize progress and consumption
4. Forecast the concrete needed to finish the tunnel
"""

import datetime as dt
import logging

from tunnelpour.core.chainage import format_chainage, format_range, parse_chainage
from tunnelpour.core.logging_config import setup_logging
from tunnelpour.core.quantities import (
    ChainageDesignIndex,
    EntryQuantityCalculator,
    ForecastEngine,
    consumption_profile,
    progress_totals,
    projection_curve,
)
from tunnelpour.models import EntryDraft, StepKind, SurveyOverridePoint


def log_supporting_pours(calculator):
    """Log invert and kicker pours ahead of the arch."""
    print("\n=== Logging Invert and Kicker Pours ===")

    entries = []
    for step, start, end, actual in [
        (StepKind.INVERT, "1+200", "1+236", 94.0),
        (StepKind.KICKER, "1+200", "1+224", 31.5),
    ]:
        draft = EntryDraft(
            date=dt.date(2025, 2, 10),
            from_chainage=parse_chainage(start),
            to_chainage=parse_chainage(end),
            step=step,
            actual_qty=actual,
        )
        entry = calculator.build_entry(draft, existing_entries=entries)
        entries.append(entry)
        print(f"  {step.value:7s} {format_range(entry.from_chainage, entry.to_chainage)}: "
              f"{entry.actual_qty:.1f} m³ (design {entry.designed_qty:.1f} m³)")

    return entries


def log_gantry_pours(calculator, entries):
    """Capture gantry pours, one of them over a re-surveyed stretch."""
    print("\n=== Capturing Gantry Pours ===")

    overrides = [
        SurveyOverridePoint(chainage=1210.0, area=37.9),
        SurveyOverridePoint(chainage=1219.0, area=38.6),
    ]

    for start, end, actual, masonry in [
        (1201.0, 1210.0, 44.2, False),
        (1210.0, 1219.0, 42.5, True),
        (1219.0, 1228.0, 47.8, False),
    ]:
        draft = EntryDraft(
            date=dt.date(2025, 3, 1) + dt.timedelta(days=len(entries)),
            from_chainage=start,
            to_chainage=end,
            actual_qty=actual,
            has_masonry_deduction=masonry,
        )
        entry = calculator.build_entry(draft, existing_entries=entries, overrides=overrides)
        entries.append(entry)

        print(f"  {format_range(entry.from_chainage, entry.to_chainage)}")
        print(f"    Prior invert/kicker: {entry.prior_invert_qty:.1f} / {entry.prior_kicker_qty:.1f} m³")
        print(f"    Cumulative actual: {entry.cumulative_actual_qty:.1f} m³")
        print(f"    Net survey: {entry.survey_qty:.1f} m³ (shotcrete {entry.shotcrete_deduction:.2f} m³)")

    return entries


def summarize(entries, design_index):
    """Print progress totals and the consumption profile."""
    print("\n=== Progress ===")

    totals = progress_totals(entries)
    print(f"  Completed length: {totals.progress_length:.1f} m")
    print(f"  Actual poured: {totals.actual:.1f} m³")
    print(f"  Survey variance: {totals.survey_variance:+.1f} m³ ({totals.survey_variance_percent:+.1f}%)")

    print("\n  Consumption by pour:")
    for point in consumption_profile(entries, design_index):
        print(f"    {format_chainage(point.chainage)}: "
              f"{point.actual_rate:.2f} vs {point.design_rate:.2f} m³/m "
              f"({point.over_consumption_pct:+.1f}%)")


def main():
    """Run the forecast demo."""
    setup_logging(log_level="WARNING")
    logging.getLogger("tunnelpour").setLevel(logging.WARNING)

    print("=" * 70)
    print("CONCRETE LINING FORECAST DEMO")
    print("=" * 70)

    design_index = ChainageDesignIndex.default()
    calculator = EntryQuantityCalculator(design_index=design_index)

    entries = log_supporting_pours(calculator)
    entries = log_gantry_pours(calculator, entries)
    summarize(entries, design_index)

    summary = ForecastEngine(design_index=design_index).forecast(entries)
    curve = projection_curve(entries, summary, design_index)

    print("\n" + "=" * 70)
    print("FORECAST")
    print("=" * 70)
    print(f"  Project scope: {summary.total_project_scope:,.1f} m³")
    print(f"  Overbreak rate: {summary.current_overbreak_rate:.3f} ({summary.overbreak_percent:+.1f}%)")
    print(f"  Remaining length: {summary.remaining_length:,.1f} m")
    print(f"  Forecast to complete: {summary.forecast_to_complete:,.1f} m³")
    print(f"  Projected grand total: {summary.projected_grand_total:,.1f} m³")
    print(f"  Projection curve: {len(curve)} points ending at '{curve[-1].label}'")


if __name__ == "__main__":
    main()
