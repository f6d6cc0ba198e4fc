#answerlens/domain/common/errors.py

"""
Domain-specific error types for standardized error handling.

Every failure inside a capture session is expressed as one of these types
and converted to an outcome before it can leave the state machine.
"""
from enum import Enum
from typing import Optional, Dict, Any


class ErrorCategory(Enum):
    """Categories of errors in the application."""
    VALIDATION = "Validation"
    CAPTURE = "Capture"
    RECOGNITION = "Recognition"
    REGION = "Region"
    PERSISTENCE = "Persistence"
    UNKNOWN = "Unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"
    CRITICAL = "Critical"


class DomainError:
    """
    Base class for domain-specific errors.

    This provides structured error information that can be used
    for consistent error handling, logging, and user feedback.
    """

    def __init__(self,
                 message: str,
                 category: ErrorCategory = ErrorCategory.UNKNOWN,
                 severity: ErrorSeverity = ErrorSeverity.ERROR,
                 code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None,
                 inner_error: Optional[Exception] = None):
        """
        Initialize a domain error.

        Args:
            message: Human-readable error message
            category: Error category
            severity: Error severity
            code: Optional error code for programmatic handling
            details: Optional additional error details
            inner_error: Optional original exception
        """
        self.message = message
        self.category = category
        self.severity = severity
        self.code = code
        self.details = details or {}
        self.inner_error = inner_error

    @staticmethod
    def from_exception(ex: Exception,
                       category: ErrorCategory = ErrorCategory.UNKNOWN,
                       severity: ErrorSeverity = ErrorSeverity.ERROR) -> 'DomainError':
        """Create a domain error wrapping an exception."""
        return DomainError(
            message=str(ex),
            category=category,
            severity=severity,
            inner_error=ex
        )

    def __str__(self) -> str:
        return f"{self.category.value} Error: {self.message}"


class ValidationError(DomainError):
    """Invalid input handed to a service (bad rectangle, unknown category)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.WARNING,
            code="validation",
            details=details,
            inner_error=inner_error
        )


class CaptureFailure(DomainError):
    """The screen capture or the crop of the captured image failed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.CAPTURE,
            severity=ErrorSeverity.ERROR,
            code="capture_failure",
            details=details,
            inner_error=inner_error
        )


class RecognitionFailure(DomainError):
    """The text recognizer failed or produced no usable text."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.RECOGNITION,
            severity=ErrorSeverity.ERROR,
            code="recognition_failure",
            details=details,
            inner_error=inner_error
        )


class NoRegionConfigured(DomainError):
    """A recognize request arrived for a category without a saved region."""

    def __init__(self, category: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"No capture region configured for '{category}'. Set a region first.",
            category=ErrorCategory.REGION,
            severity=ErrorSeverity.WARNING,
            code="no_region_configured",
            details=dict(details or {}, category=category)
        )


class PersistenceReadFailure(DomainError):
    """A region or knowledge-base file is missing or corrupt."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.PERSISTENCE,
            severity=ErrorSeverity.WARNING,
            code="persistence_read_failure",
            details=details,
            inner_error=inner_error
        )


class PersistenceWriteFailure(DomainError):
    """Writing a region or settings file failed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.PERSISTENCE,
            severity=ErrorSeverity.ERROR,
            code="persistence_write_failure",
            details=details,
            inner_error=inner_error
        )

