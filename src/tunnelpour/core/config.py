"""
Configuration settings for the Tunnelpour quantity engine.
"""

from datetime import date
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, ValidationError as PydanticValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tunnelpour.core.errors import ConfigurationError


class Settings(BaseSettings):
    """
    Engine settings with environment variable support.

    Attributes:
        total_tunnel_length: Length of the alignment in meters
        finished_inner_area: Area inside the finished lining (m²); excavated
            area above this is concrete fill
        shotcrete_deduction: Shotcrete volume deducted per meter (m³/m)
        stone_masonry_area: Stone masonry area deducted per meter (m²)
        masonry_cutoff_date: Entries dated before this never get the
            flag-derived masonry deduction
        avg_actual_invert: Typical poured invert quantity per meter (m³/m)
        avg_actual_kicker: Typical poured kicker quantity per meter (m³/m)
        default_overbreak_rate: Consumption rate assumed before any data exists
        min_overbreak_rate: Lower bound for the forecast consumption rate
        max_overbreak_rate: Upper bound for the forecast consumption rate
        design_precision: Decimal places for reported design volumes
        chainage_tolerance: Distance (m) under which two chainages are equal
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="TUNNELPOUR_",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"

    # Logging settings
    log_level: Optional[str] = None
    log_file: Optional[Path] = None
    json_logs: bool = False

    # Alignment
    total_tunnel_length: float = Field(2606.0, gt=0)

    # Section geometry and deductions
    finished_inner_area: float = Field(30.0, ge=0)
    shotcrete_deduction: float = Field(0.15, ge=0)
    stone_masonry_area: float = Field(0.35, ge=0)
    masonry_cutoff_date: date = date(2025, 1, 1)

    # Default prior quantities for full-profile entries
    avg_actual_invert: float = Field(2.6, ge=0)
    avg_actual_kicker: float = Field(1.3, ge=0)

    # Forecast rate policy
    default_overbreak_rate: float = Field(1.05, gt=0)
    min_overbreak_rate: float = Field(0.8, gt=0)
    max_overbreak_rate: float = Field(2.0, gt=0)

    # Numerics
    design_precision: int = Field(3, ge=0)
    chainage_tolerance: float = Field(0.001, gt=0)

    @model_validator(mode="after")
    def check_rate_bounds(self) -> "Settings":
        """Ensure the overbreak clamp bounds are ordered."""
        if self.min_overbreak_rate > self.max_overbreak_rate:
            raise ValueError(
                f"min_overbreak_rate ({self.min_overbreak_rate}) exceeds "
                f"max_overbreak_rate ({self.max_overbreak_rate})"
            )
        return self

    @property
    def prior_invert_share(self) -> float:
        """Fraction of a lump prior quantity attributed to the invert."""
        total = self.avg_actual_invert + self.avg_actual_kicker
        if total <= 0:
            return 0.5
        return self.avg_actual_invert / total


def load_settings(**overrides: object) -> Settings:
    """
    Build a Settings instance, reporting bad values as ConfigurationError.

    Args:
        **overrides: Explicit values taking precedence over the environment

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: If any value fails validation
    """
    try:
        return Settings(**overrides)
    except PydanticValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ConfigurationError(
            f"Invalid engine configuration: {first.get('msg', str(e))}",
            config_key=key,
            details={"errors": [err.get("msg") for err in e.errors()]},
        ) from e


# Global settings instance
settings = Settings()
