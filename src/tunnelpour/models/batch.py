"""
Pydantic models for logged pours and re-survey points.

These records arrive from the document store as camelCase documents and
are validated here before the quantity engine sees them.
"""

import datetime as dt
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from tunnelpour.models.tunnel import Interval, StepKind


def _check_loggable(step: StepKind) -> StepKind:
    if not step.is_loggable:
        raise ValueError(f"Step '{step.value}' is derived and cannot be logged")
    return step


class SurveyOverridePoint(BaseModel):
    """
    A re-measured excavation cross-section.

    Attributes:
        id: Store identifier, if the point has been saved
        chainage: Chainage in meters
        area: Excavated cross-sectional area (m²)
        date_added: When the measurement was entered
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: Optional[str] = Field(None, description="Store identifier")
    chainage: float = Field(..., description="Chainage in meters")
    area: float = Field(..., ge=0, description="Excavated area in m²")
    date_added: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc),
        description="When the point was added",
    )


class BatchEntry(BaseModel):
    """
    One logged concrete pour.

    Only the GANTRY step closes the full profile, so the cumulative and
    prior quantities are meaningful for GANTRY entries only.

    Attributes:
        id: Store identifier
        date: Pour date
        from_chainage: Start chainage in meters
        to_chainage: End chainage in meters (either order)
        step: Construction step poured
        survey_qty: Net survey volume (GANTRY only, 0 otherwise)
        gross_concrete_qty: Gross fill volume from the excavation profile
        actual_qty: Concrete dispatched for this step
        cumulative_actual_qty: actual + prior invert + prior kicker (GANTRY)
        prior_invert_qty: Invert concrete attributed to this range (GANTRY)
        prior_kicker_qty: Kicker concrete attributed to this range (GANTRY)
        designed_qty: Design volume (full profile for GANTRY)
        notes: Free text
        is_default: Whether the entry was seeded rather than logged
        has_masonry_deduction: Legacy flag for a stone masonry deduction
        stone_masonry_qty: Explicit stone masonry deduction (m³)
        shotcrete_deduction: Shotcrete deduction applied (m³)
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "3f6c1a52-8f0e-4c55-9a57-0d5d2b1f7e10",
                "date": "2025-03-14",
                "fromChainage": 1210.0,
                "toChainage": 1219.0,
                "step": "Gantry",
                "surveyQty": 68.4,
                "grossConcreteQty": 71.1,
                "actualQty": 42.5,
                "cumulativeActualQty": 77.6,
                "priorInvertQty": 23.4,
                "priorKickerQty": 11.7,
                "designedQty": 64.8,
                "hasMasonryDeduction": False,
                "shotcreteDeduction": 1.35,
            }
        },
    )

    id: str = Field(..., min_length=1, description="Store identifier")
    date: dt.date = Field(..., description="Pour date")
    from_chainage: float = Field(..., description="Start chainage in meters")
    to_chainage: float = Field(..., description="End chainage in meters")
    step: StepKind = Field(..., description="Construction step poured")
    survey_qty: float = Field(0.0, ge=0, description="Net survey volume in m³")
    gross_concrete_qty: float = Field(0.0, ge=0, description="Gross fill volume in m³")
    actual_qty: float = Field(..., ge=0, description="Concrete dispatched in m³")
    cumulative_actual_qty: Optional[float] = Field(
        None, ge=0, description="Total profile concrete in m³"
    )
    prior_invert_qty: Optional[float] = Field(None, ge=0, description="Prior invert in m³")
    prior_kicker_qty: Optional[float] = Field(None, ge=0, description="Prior kicker in m³")
    designed_qty: float = Field(0.0, ge=0, description="Design volume in m³")
    notes: Optional[str] = Field(None, description="Free text notes")
    is_default: Optional[bool] = Field(None, description="Seeded entry flag")
    has_masonry_deduction: bool = Field(False, description="Legacy masonry flag")
    stone_masonry_qty: Optional[float] = Field(
        None, ge=0, description="Explicit stone masonry deduction in m³"
    )
    shotcrete_deduction: float = Field(0.0, ge=0, description="Shotcrete deduction in m³")

    validate_step = field_validator("step")(_check_loggable)

    @property
    def interval(self) -> Interval:
        """Chainage range of the pour, normalized."""
        return Interval(self.from_chainage, self.to_chainage)

    @property
    def length(self) -> float:
        """Length of the pour in meters."""
        return abs(self.to_chainage - self.from_chainage)

    @property
    def total_actual(self) -> float:
        """Cumulative actual when populated, otherwise the raw actual."""
        if self.cumulative_actual_qty is not None:
            return self.cumulative_actual_qty
        return self.actual_qty

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the camelCase document shape used by the store."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class EntryDraft(BaseModel):
    """
    Quantities captured for a new or edited pour before derived fields
    (design, gross, survey, cumulative) are computed.

    Prior quantities and the masonry quantity are optional; when omitted
    the entry calculator fills them in.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = Field(None, description="Identifier to reuse when editing")
    date: dt.date = Field(default_factory=dt.date.today, description="Pour date")
    from_chainage: float = Field(..., description="Start chainage in meters")
    to_chainage: float = Field(..., description="End chainage in meters")
    step: StepKind = Field(StepKind.GANTRY, description="Construction step poured")
    actual_qty: float = Field(..., ge=0, description="Concrete dispatched in m³")
    prior_invert_qty: Optional[float] = Field(None, ge=0, description="Prior invert in m³")
    prior_kicker_qty: Optional[float] = Field(None, ge=0, description="Prior kicker in m³")
    stone_masonry_qty: Optional[float] = Field(
        None, ge=0, description="Explicit stone masonry deduction in m³"
    )
    has_masonry_deduction: bool = Field(False, description="Legacy masonry flag")
    notes: Optional[str] = Field(None, description="Free text notes")

    validate_step = field_validator("step")(_check_loggable)

    @property
    def length(self) -> float:
        """Length of the pour in meters."""
        return abs(self.to_chainage - self.from_chainage)
