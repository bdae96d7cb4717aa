"""
Custom exceptions for the Training Log analytics core.

The analytics functions themselves absorb malformed user data and degrade
to "no signal". The exceptions below cover the remaining cases: contract
violations by callers, missing records requested through the API or CLI,
unreadable training-log documents and failures of the external coaching
text service. Each exception carries:
- A descriptive message
- An error code for API responses
- HTTP status code mapping
- Optional details for debugging
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes for consistent API error responses."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Session errors
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"

    # Data file errors
    DATA_FILE_ERROR = "DATA_FILE_ERROR"

    # Coaching text service errors
    COACH_SERVICE_UNAVAILABLE = "COACH_SERVICE_UNAVAILABLE"
    COACH_RATE_LIMITED = "COACH_RATE_LIMITED"


class TrainingLogError(Exception):
    """
    Base exception for all Training Log errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        status_code: HTTP status code for API responses
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# ============================================================================
# Validation Errors (400)
# ============================================================================

class ValidationError(TrainingLogError):
    """Raised when a caller passes an invalid call shape."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=error_details,
        )


# ============================================================================
# Not Found Errors (404)
# ============================================================================

class NotFoundError(TrainingLogError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        message: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if resource_type:
            error_details["resource_type"] = resource_type
        if resource_id:
            error_details["resource_id"] = resource_id
        super().__init__(
            message=message,
            code=ErrorCode.NOT_FOUND,
            status_code=404,
            details=error_details,
        )


class SessionNotFoundError(NotFoundError):
    """Raised when a session is not present in the training log."""

    def __init__(self, session_id: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=f"Session not found: {session_id}",
            resource_type="session",
            resource_id=session_id,
            details=details,
        )
        self.code = ErrorCode.SESSION_NOT_FOUND


# ============================================================================
# Data File Errors
# ============================================================================

class DataFileError(TrainingLogError):
    """Raised when a training-log document cannot be read or written."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if path:
            error_details["path"] = path
        super().__init__(
            message=message,
            code=ErrorCode.DATA_FILE_ERROR,
            status_code=400,
            details=error_details,
        )


# ============================================================================
# Coaching Text Service Errors
# ============================================================================

class CoachServiceError(TrainingLogError):
    """Raised when the external text-completion service fails."""

    def __init__(
        self,
        message: str = "Coaching service unavailable",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.COACH_SERVICE_UNAVAILABLE,
            status_code=503,
            details=details,
        )


class CoachRateLimitError(CoachServiceError):
    """Raised when the text-completion service quota is exhausted."""

    def __init__(
        self,
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if retry_after:
            error_details["retry_after_seconds"] = retry_after
        super().__init__(
            message="Coaching service rate limit exceeded. Please try again later.",
            details=error_details,
        )
        self.retry_after = retry_after
        self.code = ErrorCode.COACH_RATE_LIMITED
        self.status_code = 429
