"""
Tests for custom exception hierarchy.
"""

import pytest

from tunnelpour.core.errors import (
    ConfigurationError,
    DatasetError,
    ParseError,
    TunnelpourException,
    ValidationError,
)


class TestTunnelpourException:
    """Tests for base TunnelpourException class."""

    def test_basic_exception(self):
        """Test basic exception creation."""
        exc = TunnelpourException(
            message="Test error",
            error_code="TEST_ERROR",
        )

        assert str(exc) == "TEST_ERROR: Test error"
        assert exc.message == "Test error"
        assert exc.error_code == "TEST_ERROR"
        assert exc.details == {}
        assert exc.suggestions == []

    def test_to_dict(self):
        """Test conversion to dictionary."""
        exc = TunnelpourException(
            message="Test error",
            error_code="TEST_ERROR",
            details={"key": "value"},
            suggestions=["suggestion"],
        )

        assert exc.to_dict() == {
            "error_code": "TEST_ERROR",
            "message": "Test error",
            "details": {"key": "value"},
            "suggestions": ["suggestion"],
        }

    def test_repr(self):
        """Test string representation."""
        repr_str = repr(TunnelpourException(message="Test error", error_code="TEST_ERROR"))

        assert "TunnelpourException" in repr_str
        assert "TEST_ERROR" in repr_str
        assert "Test error" in repr_str


class TestValidationError:
    """Tests for ValidationError."""

    def test_field_recorded(self):
        """Test the failing field is recorded in details."""
        exc = ValidationError("Negative quantity", field="actual_qty")

        assert exc.error_code == "VALIDATION_ERROR"
        assert exc.details["field"] == "actual_qty"
        assert exc.suggestions

    def test_is_tunnelpour_exception(self):
        """Test subclasses can be caught as the base exception."""
        with pytest.raises(TunnelpourException):
            raise ValidationError("bad input")


class TestParseError:
    """Tests for ParseError."""

    def test_value_recorded(self):
        """Test the rejected text is recorded."""
        exc = ParseError("Cannot parse", value="1+x")

        assert exc.error_code == "PARSE_ERROR"
        assert exc.details["value"] == "1+x"
        assert any("1+040" in s for s in exc.suggestions)


class TestDatasetError:
    """Tests for DatasetError."""

    def test_dataset_recorded(self):
        """Test the dataset name is recorded alongside extra details."""
        exc = DatasetError("Empty", dataset="chainage_map", details={"count": 0})

        assert exc.error_code == "DATASET_ERROR"
        assert exc.details == {"count": 0, "dataset": "chainage_map"}


class TestConfigurationError:
    """Tests for ConfigurationError."""

    def test_custom_suggestions(self):
        """Test custom suggestions replace the defaults."""
        exc = ConfigurationError("Bad", config_key="max_overbreak_rate", suggestions=["Fix it"])

        assert exc.error_code == "CONFIGURATION_ERROR"
        assert exc.details["config_key"] == "max_overbreak_rate"
        assert exc.suggestions == ["Fix it"]
