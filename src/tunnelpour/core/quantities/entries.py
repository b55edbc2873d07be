"""
Entry quantity capture.

Turns the quantities a site engineer enters for a pour into a complete
BatchEntry: design volume, gross and net survey volumes, deductions and
the prior invert/kicker concrete that a full-profile pour sits on.
"""

import datetime as dt
import logging
import uuid
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError as PydanticValidationError

from tunnelpour.core.config import Settings, settings as default_settings
from tunnelpour.core.errors import ValidationError
from tunnelpour.core.quantities.apportion import prior_volume
from tunnelpour.core.quantities.design_index import ChainageDesignIndex
from tunnelpour.core.quantities.profile import OverrideInput
from tunnelpour.core.quantities.volume_integrator import VolumeIntegrator
from tunnelpour.models.batch import BatchEntry, EntryDraft
from tunnelpour.models.tunnel import StepKind

logger = logging.getLogger(__name__)


def design_step_for(step: StepKind) -> StepKind:
    """
    Design lookup step for a logged step.

    A gantry pour closes the full profile, so its design quantity is the
    full-profile (SUM) volume. Invert and kicker use their own stage.
    """
    if step is StepKind.GANTRY:
        return StepKind.SUM
    return step


def resolve_masonry_deduction(
    length: float,
    entry_date: dt.date,
    stone_masonry_qty: Optional[float] = None,
    has_masonry_deduction: bool = False,
    config: Optional[Settings] = None,
) -> float:
    """
    Stone masonry deduction for an entry.

    An explicit quantity always wins. Otherwise the legacy flag derives one
    from the length, but only for entries dated on or after the cutoff.

    Args:
        length: Entry length in meters
        entry_date: Pour date
        stone_masonry_qty: Explicit deduction in m³, if recorded
        has_masonry_deduction: Legacy boolean flag
        config: Engine settings (global settings if omitted)

    Returns:
        Deduction in m³
    """
    config = config or default_settings

    if stone_masonry_qty is not None:
        return max(0.0, stone_masonry_qty)
    if has_masonry_deduction and entry_date >= config.masonry_cutoff_date:
        return length * config.stone_masonry_area
    return 0.0


class EntryQuantityCalculator:
    """
    Derive the stored quantities of a pour from a draft.

    Example:
        >>> calculator = EntryQuantityCalculator()
        >>> draft = EntryDraft(from_chainage=1210, to_chainage=1219, actual_qty=42.5)
        >>> entry = calculator.build_entry(draft, existing_entries=entries)
        >>> entry.cumulative_actual_qty
        77.6
    """

    def __init__(
        self,
        design_index: Optional[ChainageDesignIndex] = None,
        integrator: Optional[VolumeIntegrator] = None,
        config: Optional[Settings] = None,
    ) -> None:
        """
        Initialize the calculator.

        Args:
            design_index: Design lookup (reference alignment if omitted)
            integrator: Fill volume integrator (reference survey if omitted)
            config: Engine settings (global settings if omitted)
        """
        self.config = config or default_settings
        self.design_index = design_index or ChainageDesignIndex.default(config=self.config)
        self.integrator = integrator or VolumeIntegrator(config=self.config)

    @staticmethod
    def parse_draft(data: Mapping[str, Any]) -> EntryDraft:
        """
        Validate raw form or document data into a draft.

        Args:
            data: Draft fields, snake_case or camelCase

        Returns:
            Validated EntryDraft

        Raises:
            ValidationError: If any field is missing or invalid
        """
        try:
            return EntryDraft.model_validate(data)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or None
            raise ValidationError(
                f"Invalid entry: {first.get('msg', str(e))}",
                field=field,
                details={"errors": [err.get("msg") for err in e.errors()]},
            ) from e

    def split_prior_total(self, total: float) -> Tuple[float, float]:
        """
        Split a lump prior quantity into invert and kicker parts.

        The split follows the ratio of the average invert and kicker rates.

        Args:
            total: Combined prior quantity in m³

        Returns:
            (prior_invert, prior_kicker) in m³
        """
        total = max(0.0, total)
        invert = total * self.config.prior_invert_share
        return invert, total - invert

    def priors_for_edit(self, entry: BatchEntry) -> Tuple[float, float]:
        """
        Prior invert/kicker quantities to show when editing an entry.

        Older entries only stored the cumulative quantity; their prior is
        recovered as cumulative minus actual and split by the rate ratio.

        Args:
            entry: Stored entry

        Returns:
            (prior_invert, prior_kicker) in m³
        """
        if entry.prior_invert_qty is not None or entry.prior_kicker_qty is not None:
            return entry.prior_invert_qty or 0.0, entry.prior_kicker_qty or 0.0
        return self.split_prior_total(entry.total_actual - entry.actual_qty)

    def default_priors(
        self,
        from_chainage: float,
        to_chainage: float,
        existing_entries: Iterable[BatchEntry] = (),
    ) -> Tuple[float, float]:
        """
        Prior invert and kicker quantities under a full-profile pour.

        Each stage is apportioned from the logged entries of that stage
        overlapping the range. A stage with no logged pour over the range
        falls back to length × the average rate.

        Args:
            from_chainage: Range start (either order)
            to_chainage: Range end
            existing_entries: Entries logged so far

        Returns:
            (prior_invert, prior_kicker) in m³
        """
        snapshot = tuple(existing_entries)
        start = min(from_chainage, to_chainage)
        end = max(from_chainage, to_chainage)
        length = end - start

        priors = []
        for step, avg_rate in (
            (StepKind.INVERT, self.config.avg_actual_invert),
            (StepKind.KICKER, self.config.avg_actual_kicker),
        ):
            logged = any(
                e.step == step
                and e.length > 0
                and min(end, e.interval.end) - max(start, e.interval.start) > 0
                for e in snapshot
            )
            if logged:
                priors.append(prior_volume(start, end, step, snapshot))
            else:
                priors.append(length * avg_rate)

        return priors[0], priors[1]

    def build_entry(
        self,
        draft: EntryDraft,
        existing_entries: Sequence[BatchEntry] = (),
        overrides: OverrideInput = None,
    ) -> BatchEntry:
        """
        Build a complete entry from a draft.

        Args:
            draft: Captured quantities
            existing_entries: Entries logged so far (used for prior defaults);
                an entry with the draft's id is ignored so edits do not
                count themselves
            overrides: Re-survey points for the fill volume

        Returns:
            New BatchEntry with all derived quantities populated

        Raises:
            ValidationError: If the draft covers no length
        """
        if draft.length <= 0:
            raise ValidationError(
                "Entry must cover a non-zero chainage range",
                field="to_chainage",
                details={"from_chainage": draft.from_chainage, "to_chainage": draft.to_chainage},
            )

        entry_id = draft.id or str(uuid.uuid4())
        others = tuple(e for e in existing_entries if e.id != entry_id)

        designed = self.design_index.design_volume(
            draft.from_chainage, draft.to_chainage, design_step_for(draft.step)
        )
        fill = self.integrator.fill_volume(draft.from_chainage, draft.to_chainage, overrides)
        masonry = resolve_masonry_deduction(
            draft.length,
            draft.date,
            draft.stone_masonry_qty,
            draft.has_masonry_deduction,
            config=self.config,
        )

        if draft.step is StepKind.GANTRY:
            default_invert, default_kicker = self.default_priors(
                draft.from_chainage, draft.to_chainage, others
            )
            prior_invert = (
                draft.prior_invert_qty if draft.prior_invert_qty is not None else default_invert
            )
            prior_kicker = (
                draft.prior_kicker_qty if draft.prior_kicker_qty is not None else default_kicker
            )
            survey = fill.net(masonry)
        else:
            prior_invert = prior_kicker = 0.0
            survey = 0.0

        entry = BatchEntry(
            id=entry_id,
            date=draft.date,
            from_chainage=draft.from_chainage,
            to_chainage=draft.to_chainage,
            step=draft.step,
            survey_qty=survey,
            gross_concrete_qty=fill.gross,
            actual_qty=draft.actual_qty,
            cumulative_actual_qty=draft.actual_qty + prior_invert + prior_kicker,
            prior_invert_qty=prior_invert,
            prior_kicker_qty=prior_kicker,
            designed_qty=designed,
            notes=draft.notes,
            has_masonry_deduction=masonry > 0,
            stone_masonry_qty=masonry,
            shotcrete_deduction=fill.shotcrete_deduction,
        )

        logger.info(
            f"Built {draft.step.value} entry {entry_id}: "
            f"design={designed:.3f} m³, survey={survey:.3f} m³, "
            f"cumulative={entry.cumulative_actual_qty:.3f} m³",
            extra={"entry_id": entry_id, "step": draft.step.value},
        )

        return entry

    @staticmethod
    def supersede(entry: BatchEntry, **changes: Any) -> BatchEntry:
        """
        Replacement for an edited entry, keeping its id.

        The stored entry is never modified; the returned copy is validated
        like a freshly loaded document.

        Args:
            entry: Entry being edited
            **changes: Field values to replace (snake_case names)

        Returns:
            New BatchEntry with the same id

        Raises:
            ValidationError: If the id would change or a value is invalid
        """
        if "id" in changes and changes["id"] != entry.id:
            raise ValidationError(
                "An edit cannot change the entry id",
                field="id",
                details={"id": entry.id, "new_id": changes["id"]},
            )

        data = entry.model_dump()
        data.update(changes)
        try:
            return BatchEntry.model_validate(data)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or None
            raise ValidationError(
                f"Invalid edit of entry {entry.id}: {first.get('msg', str(e))}",
                field=field,
                details={"errors": [err.get("msg") for err in e.errors()]},
            ) from e
