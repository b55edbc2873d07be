"""
Tests for configuration module.
"""

import datetime as dt

import pytest
from pydantic import ValidationError as PydanticValidationError

from tunnelpour.core.config import Settings, load_settings
from tunnelpour.core.errors import ConfigurationError


class TestSettings:
    """Tests for Settings class."""

    def test_default_values(self, monkeypatch) -> None:
        """Test that default values are set correctly."""
        monkeypatch.delenv("TUNNELPOUR_ENVIRONMENT", raising=False)
        settings = Settings()
        assert settings.environment == "development"
        assert settings.total_tunnel_length == 2606.0
        assert settings.finished_inner_area == 30.0
        assert settings.shotcrete_deduction == 0.15
        assert settings.stone_masonry_area == 0.35
        assert settings.default_overbreak_rate == 1.05
        assert settings.min_overbreak_rate == 0.8
        assert settings.max_overbreak_rate == 2.0
        assert settings.design_precision == 3

    def test_env_override(self, monkeypatch) -> None:
        """Test values are read from prefixed environment variables."""
        monkeypatch.setenv("TUNNELPOUR_FINISHED_INNER_AREA", "28.5")
        monkeypatch.setenv("TUNNELPOUR_MASONRY_CUTOFF_DATE", "2024-07-01")
        settings = Settings()
        assert settings.finished_inner_area == 28.5
        assert settings.masonry_cutoff_date == dt.date(2024, 7, 1)

    def test_custom_values(self) -> None:
        """Test setting custom configuration values."""
        settings = Settings(
            total_tunnel_length=1500.0,
            avg_actual_invert=3.0,
            environment="production",
        )
        assert settings.total_tunnel_length == 1500.0
        assert settings.avg_actual_invert == 3.0
        assert settings.environment == "production"

    def test_prior_invert_share(self) -> None:
        """Test the invert share of a lump prior quantity."""
        settings = Settings(avg_actual_invert=3.0, avg_actual_kicker=1.0)
        assert settings.prior_invert_share == pytest.approx(0.75)

    def test_prior_invert_share_without_rates(self) -> None:
        """Test an even split when no average rates are set."""
        settings = Settings(avg_actual_invert=0.0, avg_actual_kicker=0.0)
        assert settings.prior_invert_share == 0.5

    def test_rate_bounds_ordered(self) -> None:
        """Test inverted clamp bounds are rejected."""
        with pytest.raises(PydanticValidationError):
            Settings(min_overbreak_rate=2.5, max_overbreak_rate=2.0)

    def test_negative_deduction_rejected(self) -> None:
        """Test negative deductions are rejected."""
        with pytest.raises(PydanticValidationError):
            Settings(shotcrete_deduction=-0.1)


class TestLoadSettings:
    """Tests for load_settings."""

    def test_valid(self) -> None:
        """Test overrides are applied."""
        settings = load_settings(chainage_tolerance=0.01)
        assert settings.chainage_tolerance == 0.01

    def test_invalid_value(self) -> None:
        """Test invalid values raise ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(total_tunnel_length=-5)

        assert exc_info.value.error_code == "CONFIGURATION_ERROR"
        assert exc_info.value.details["config_key"] == "total_tunnel_length"
        assert exc_info.value.details["errors"]
