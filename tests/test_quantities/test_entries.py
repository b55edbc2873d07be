"""
Tests for entry quantity capture.

Tests derived quantities of new entries, prior defaults, masonry
resolution, and edit semantics.
"""

import datetime as dt
import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from tunnelpour.core.config import Settings
from tunnelpour.core.errors import ValidationError
from tunnelpour.core.quantities.design_index import ChainageDesignIndex
from tunnelpour.core.quantities.entries import (
    EntryQuantityCalculator,
    design_step_for,
    resolve_masonry_deduction,
)
from tunnelpour.core.quantities.profile import ExcavationProfileResolver
from tunnelpour.core.quantities.volume_integrator import VolumeIntegrator
from tunnelpour.models.batch import BatchEntry, EntryDraft
from tunnelpour.models.tunnel import (
    ChainageSegment,
    ExcavationPoint,
    RockClass,
    RockClassAreas,
    StepKind,
)


@pytest.fixture
def config():
    """Settings with the standard rates and a 2025 masonry cutoff."""
    return Settings(
        finished_inner_area=30.0,
        shotcrete_deduction=0.15,
        stone_masonry_area=0.35,
        masonry_cutoff_date=dt.date(2025, 1, 1),
        avg_actual_invert=2.6,
        avg_actual_kicker=1.3,
    )


@pytest.fixture
def calculator(config):
    """Calculator over a 100 m class III alignment."""
    index = ChainageDesignIndex(
        [ChainageSegment(0.0, 100.0, RockClass.III)],
        {RockClass.III: RockClassAreas.from_stages(invert=2.0, kicker=1.0, gantry=5.0)},
        config=config,
    )
    resolver = ExcavationProfileResolver(
        [ExcavationPoint(0.0, 40.0), ExcavationPoint(100.0, 36.0)], config=config
    )
    integrator = VolumeIntegrator(resolver=resolver, config=config)
    return EntryQuantityCalculator(design_index=index, integrator=integrator, config=config)


def logged(entry_id, start, end, step, actual):
    """Create an already logged entry."""
    return BatchEntry(
        id=entry_id,
        date=dt.date(2025, 2, 1),
        from_chainage=start,
        to_chainage=end,
        step=step,
        actual_qty=actual,
    )


def draft(**overrides):
    """Create a gantry draft over 0+000 to 0+010."""
    values = {
        "date": dt.date(2025, 3, 1),
        "from_chainage": 0.0,
        "to_chainage": 10.0,
        "step": StepKind.GANTRY,
        "actual_qty": 50.0,
    }
    values.update(overrides)
    return EntryDraft(**values)


class TestDesignStep:
    """Test design step selection."""

    def test_gantry_uses_full_profile(self):
        """Test a gantry pour is compared with the full profile."""
        assert design_step_for(StepKind.GANTRY) is StepKind.SUM

    def test_other_steps_unchanged(self):
        """Test invert and kicker use their own stage."""
        assert design_step_for(StepKind.INVERT) is StepKind.INVERT
        assert design_step_for(StepKind.KICKER) is StepKind.KICKER


class TestMasonryDeduction:
    """Test masonry deduction resolution."""

    def test_explicit_quantity_wins(self, config):
        """Test an explicit quantity is used even with the flag set."""
        assert resolve_masonry_deduction(
            10.0, dt.date(2025, 3, 1), 1.25, True, config=config
        ) == pytest.approx(1.25)

    def test_explicit_zero(self, config):
        """Test an explicit zero suppresses the flag-derived value."""
        assert resolve_masonry_deduction(10.0, dt.date(2025, 3, 1), 0.0, True, config=config) == 0.0

    def test_flag_after_cutoff(self, config):
        """Test the flag derives length × masonry area after the cutoff."""
        assert resolve_masonry_deduction(
            10.0, dt.date(2025, 1, 1), None, True, config=config
        ) == pytest.approx(3.5)

    def test_flag_before_cutoff(self, config):
        """Test the flag is ignored for entries before the cutoff."""
        assert resolve_masonry_deduction(10.0, dt.date(2024, 12, 31), None, True, config=config) == 0.0

    def test_no_flag(self, config):
        """Test no deduction without flag or quantity."""
        assert resolve_masonry_deduction(10.0, dt.date(2025, 3, 1), config=config) == 0.0


class TestBuildEntry:
    """Test building entries from drafts."""

    def test_gantry_defaults(self, calculator):
        """Test a gantry pour with nothing logged underneath."""
        entry = calculator.build_entry(draft(id="g-1"))

        assert entry.id == "g-1"
        assert entry.designed_qty == pytest.approx(80.0)
        assert entry.gross_concrete_qty == pytest.approx(98.0)
        assert entry.shotcrete_deduction == pytest.approx(1.5)
        assert entry.survey_qty == pytest.approx(96.5)
        assert entry.prior_invert_qty == pytest.approx(26.0)
        assert entry.prior_kicker_qty == pytest.approx(13.0)
        assert entry.cumulative_actual_qty == pytest.approx(89.0)
        assert entry.has_masonry_deduction is False

    def test_gantry_apportioned_priors(self, calculator):
        """Test priors come from logged invert and kicker pours."""
        existing = [
            logged("i-1", 0.0, 20.0, StepKind.INVERT, 40.0),
            logged("k-1", 0.0, 20.0, StepKind.KICKER, 30.0),
        ]
        entry = calculator.build_entry(draft(), existing_entries=existing)

        assert entry.prior_invert_qty == pytest.approx(20.0)
        assert entry.prior_kicker_qty == pytest.approx(15.0)
        assert entry.cumulative_actual_qty == pytest.approx(85.0)

    def test_only_one_stage_logged(self, calculator):
        """Test a stage with no logged pour falls back to the average rate."""
        existing = [logged("i-1", 0.0, 20.0, StepKind.INVERT, 40.0)]
        entry = calculator.build_entry(draft(), existing_entries=existing)

        assert entry.prior_invert_qty == pytest.approx(20.0)
        assert entry.prior_kicker_qty == pytest.approx(13.0)

    def test_explicit_priors(self, calculator):
        """Test priors entered on the draft are kept."""
        entry = calculator.build_entry(draft(prior_invert_qty=5.0, prior_kicker_qty=0.0))

        assert entry.prior_invert_qty == 5.0
        assert entry.prior_kicker_qty == 0.0
        assert entry.cumulative_actual_qty == pytest.approx(55.0)

    def test_invert_entry(self, calculator):
        """Test an invert pour has no survey or priors."""
        entry = calculator.build_entry(draft(step=StepKind.INVERT, actual_qty=22.0))

        assert entry.designed_qty == pytest.approx(20.0)
        assert entry.survey_qty == 0.0
        assert entry.prior_invert_qty == 0.0
        assert entry.prior_kicker_qty == 0.0
        assert entry.cumulative_actual_qty == pytest.approx(22.0)

    def test_masonry_flag(self, calculator):
        """Test the masonry flag reduces the survey volume."""
        entry = calculator.build_entry(draft(has_masonry_deduction=True))

        assert entry.stone_masonry_qty == pytest.approx(3.5)
        assert entry.has_masonry_deduction is True
        assert entry.survey_qty == pytest.approx(93.0)

    def test_reversed_range(self, calculator):
        """Test a draft entered end-first gives the same quantities."""
        forward = calculator.build_entry(draft())
        backward = calculator.build_entry(draft(from_chainage=10.0, to_chainage=0.0))

        assert backward.designed_qty == pytest.approx(forward.designed_qty)
        assert backward.survey_qty == pytest.approx(forward.survey_qty)

    def test_generated_id(self, calculator):
        """Test a new entry gets an identifier."""
        entry = calculator.build_entry(draft())
        assert entry.id

    def test_zero_length_rejected(self, calculator):
        """Test a draft covering no length is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            calculator.build_entry(draft(to_chainage=0.0))
        assert exc_info.value.details["field"] == "to_chainage"

    def test_edit_ignores_own_entry(self, calculator):
        """Test an edited entry does not count towards its own priors."""
        existing = [logged("x-1", 0.0, 10.0, StepKind.INVERT, 100.0)]
        entry = calculator.build_entry(draft(id="x-1"), existing_entries=existing)

        assert entry.prior_invert_qty == pytest.approx(26.0)

    def test_log_record_fields(self, calculator, caplog):
        """Test the build summary carries the entry id and step."""
        with caplog.at_level(logging.INFO, logger="tunnelpour.core.quantities.entries"):
            calculator.build_entry(draft(id="g-7"))

        record = caplog.records[-1]
        assert record.entry_id == "g-7"
        assert record.step == "Gantry"

    def test_concurrent_builds_leave_logging_untouched(self, calculator):
        """Test parallel builds do not leak entry fields into other records."""
        factory = logging.getLogRecordFactory()

        def build(n):
            return calculator.build_entry(draft(id=f"e{n % 8}")).id

        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(build, range(400)))

        assert len(ids) == 400
        assert logging.getLogRecordFactory() is factory
        record = factory("tunnelpour.other", logging.INFO, __file__, 1, "unrelated", (), None)
        assert not hasattr(record, "entry_id")
        assert not hasattr(record, "step")


class TestDraftParsing:
    """Test draft validation."""

    def test_camel_case_document(self):
        """Test drafts accept store document keys."""
        parsed = EntryQuantityCalculator.parse_draft(
            {"fromChainage": 1210, "toChainage": 1219, "actualQty": 42.5, "step": "Gantry"}
        )
        assert parsed.from_chainage == 1210.0
        assert parsed.step is StepKind.GANTRY

    def test_negative_quantity(self):
        """Test negative quantities are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            EntryQuantityCalculator.parse_draft(
                {"from_chainage": 0, "to_chainage": 10, "actual_qty": -1}
            )
        assert exc_info.value.error_code == "VALIDATION_ERROR"
        assert exc_info.value.details["field"]

    def test_derived_step_rejected(self):
        """Test the full profile step cannot be logged."""
        with pytest.raises(ValidationError):
            EntryQuantityCalculator.parse_draft(
                {"from_chainage": 0, "to_chainage": 10, "actual_qty": 1, "step": "Total Sum"}
            )


class TestPriorSplit:
    """Test splitting lump prior quantities."""

    def test_split_ratio(self, calculator):
        """Test the split follows the average invert/kicker ratio."""
        invert, kicker = calculator.split_prior_total(39.0)
        assert invert == pytest.approx(26.0)
        assert kicker == pytest.approx(13.0)

    def test_negative_total(self, calculator):
        """Test a negative lump splits to nothing."""
        assert calculator.split_prior_total(-5.0) == (0.0, 0.0)

    def test_legacy_entry(self, calculator):
        """Test priors are recovered from a cumulative-only entry."""
        entry = BatchEntry(
            id="g-1",
            date=dt.date(2024, 6, 1),
            from_chainage=0.0,
            to_chainage=10.0,
            step=StepKind.GANTRY,
            actual_qty=50.0,
            cumulative_actual_qty=89.0,
        )
        invert, kicker = calculator.priors_for_edit(entry)
        assert invert == pytest.approx(26.0)
        assert kicker == pytest.approx(13.0)

    def test_stored_priors(self, calculator):
        """Test stored priors are returned as they are."""
        entry = logged("g-1", 0.0, 10.0, StepKind.GANTRY, 50.0).model_copy(
            update={"prior_invert_qty": 7.0}
        )
        assert calculator.priors_for_edit(entry) == (7.0, 0.0)


class TestSupersede:
    """Test edit semantics."""

    def test_same_id(self, calculator):
        """Test the replacement keeps the id and the original is unchanged."""
        original = calculator.build_entry(draft(id="g-1"))
        edited = EntryQuantityCalculator.supersede(original, actual_qty=60.0, notes="re-batched")

        assert edited.id == "g-1"
        assert edited.actual_qty == 60.0
        assert edited.notes == "re-batched"
        assert original.actual_qty == 50.0

    def test_id_change_rejected(self, calculator):
        """Test an edit cannot change the id."""
        original = calculator.build_entry(draft(id="g-1"))
        with pytest.raises(ValidationError):
            EntryQuantityCalculator.supersede(original, id="g-2")

    def test_invalid_value_rejected(self, calculator):
        """Test invalid values are reported as validation errors."""
        original = calculator.build_entry(draft(id="g-1"))
        with pytest.raises(ValidationError):
            EntryQuantityCalculator.supersede(original, actual_qty=-3.0)
