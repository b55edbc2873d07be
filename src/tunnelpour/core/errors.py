"""
Custom exception hierarchy for Tunnelpour.

The quantity engine itself prefers defined fallback values over raised
failures. These exceptions are raised at the boundaries: when static
reference data is built, and when caller input is checked before it
reaches the engine.
"""

from typing import Any, ClassVar, Dict, List, Optional, Tuple


class TunnelpourException(Exception):
    """
    Base exception for all Tunnelpour-specific errors.

    Attributes:
        error_code: String identifier for the error type
        message: User-friendly error message
        details: Technical details for logging/debugging
        suggestions: Optional list of resolution suggestions
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = dict(details or {})
        self.suggestions = list(suggestions or [])

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary form for the calling layer."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "suggestions": self.suggestions,
        }

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(error_code={self.error_code!r}, message={self.message!r})"


class _SubjectError(TunnelpourException):
    """
    Error about one named subject (a field, a text value, a dataset, ...).

    Subclasses declare their code, the details key the subject is stored
    under, and the suggestions shown when the caller gives none.
    """

    code: ClassVar[str]
    subject_key: ClassVar[str]
    default_suggestions: ClassVar[Tuple[str, ...]] = ()

    def __init__(
        self,
        message: str,
        subject: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        merged = dict(details or {})
        if subject is not None:
            merged[self.subject_key] = subject

        super().__init__(
            message=message,
            error_code=self.code,
            details=merged,
            suggestions=suggestions or list(self.default_suggestions),
        )


class ValidationError(_SubjectError):
    """
    Raised when caller input fails validation.

    Used for entry drafts with negative quantities, derived steps passed
    where a loggable step is required, and zero-length pours.
    """

    code = "VALIDATION_ERROR"
    subject_key = "field"
    default_suggestions = ("Check the input values and try again",)

    def __init__(self, message: str, field: Optional[str] = None, **kwargs: Any):
        super().__init__(message, field, **kwargs)


class ParseError(_SubjectError):
    """Raised when chainage text cannot be parsed."""

    code = "PARSE_ERROR"
    subject_key = "value"
    default_suggestions = (
        "Write chainage as kilometers+meters, e.g. 1+040 or 0+922.50",
        "A plain meter value such as 1040 is also accepted",
    )

    def __init__(self, message: str, value: Optional[str] = None, **kwargs: Any):
        super().__init__(message, value, **kwargs)


class DatasetError(_SubjectError):
    """
    Raised when static reference data is unusable.

    Used for empty or unsorted excavation datasets, chainage segments with
    from >= to, and rock classes with missing or negative design areas.
    """

    code = "DATASET_ERROR"
    subject_key = "dataset"
    default_suggestions = (
        "Check the reference data against the design drawings",
        "Ensure chainages are in meters and ascending",
    )

    def __init__(self, message: str, dataset: Optional[str] = None, **kwargs: Any):
        super().__init__(message, dataset, **kwargs)


class ConfigurationError(_SubjectError):
    """Raised when engine configuration is invalid."""

    code = "CONFIGURATION_ERROR"
    subject_key = "config_key"
    default_suggestions = (
        "Check TUNNELPOUR_ environment variables are set correctly",
        "Verify .env file syntax",
    )

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs: Any):
        super().__init__(message, config_key, **kwargs)
