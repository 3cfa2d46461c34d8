"""
Custom exceptions for GoTrain.

Every error that reaches the user carries:
- A descriptive message (shown verbatim)
- An error code
- Optional details for debugging

Plan parse failures are deliberately absent: the parser and the revision
handler return tagged results instead of raising.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes for consistent error reporting."""

    # General
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    OPERATION_IN_PROGRESS = "OPERATION_IN_PROGRESS"

    # Session / credentials
    NOT_CONNECTED = "NOT_CONNECTED"
    GOALS_NOT_SET = "GOALS_NOT_SET"

    # Upstream data
    DATA_FETCH_FAILED = "DATA_FETCH_FAILED"

    # LLM
    LLM_SERVICE_UNAVAILABLE = "LLM_SERVICE_UNAVAILABLE"
    LLM_RATE_LIMITED = "LLM_RATE_LIMITED"
    LLM_RESPONSE_INVALID = "LLM_RESPONSE_INVALID"
    LLM_TIMEOUT = "LLM_TIMEOUT"
    LLM_API_ERROR = "LLM_API_ERROR"

    # Storage
    DATABASE_ERROR = "DATABASE_ERROR"


class GoTrainError(Exception):
    """
    Base exception for all GoTrain errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary."""
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


class ConfigurationError(GoTrainError):
    """Raised when a required setting is missing."""

    def __init__(self, setting: str, details: Optional[Dict[str, Any]] = None) -> None:
        error_details = details or {}
        error_details["setting"] = setting
        super().__init__(
            message=f"Missing configuration: {setting}",
            code=ErrorCode.CONFIGURATION_ERROR,
            details=error_details,
        )


class NotConnectedError(GoTrainError):
    """Raised when no valid Strava token is available."""

    def __init__(
        self,
        message: str = "Please connect to Strava first.",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, code=ErrorCode.NOT_CONNECTED, details=details)


class GoalsNotSetError(GoTrainError):
    """Raised when an operation needs saved goals and there are none."""

    def __init__(self, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message="Please save your training goals first.",
            code=ErrorCode.GOALS_NOT_SET,
            details=details,
        )


class OperationInProgressError(GoTrainError):
    """Raised when an operation is re-triggered while still running."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(
            message=f"Operation already in progress: {operation}",
            code=ErrorCode.OPERATION_IN_PROGRESS,
            details={"operation": operation},
        )


class DataFetchError(GoTrainError):
    """Raised when activity or strength history cannot be fetched."""

    def __init__(
        self,
        message: str,
        source: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.source = source
        error_details = details or {}
        error_details["source"] = source
        super().__init__(
            message=message,
            code=ErrorCode.DATA_FETCH_FAILED,
            details=error_details,
        )


# ============================================================================
# LLM Errors
# ============================================================================

class LLMError(GoTrainError):
    """Base class for LLM-related errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.LLM_API_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, code=code, details=details)


class LLMServiceUnavailableError(LLMError):
    """Raised when the LLM service is unavailable."""

    def __init__(
        self,
        message: str = "LLM service is currently unavailable",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.LLM_SERVICE_UNAVAILABLE,
            details=details,
        )


class LLMRateLimitError(LLMError):
    """Raised when LLM rate limits are hit."""

    def __init__(
        self,
        message: str = "LLM service rate limit exceeded. Please try again later.",
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if retry_after:
            error_details["retry_after_seconds"] = retry_after
        super().__init__(
            message=message,
            code=ErrorCode.LLM_RATE_LIMITED,
            details=error_details,
        )


class LLMTimeoutError(LLMError):
    """Raised when an LLM request times out."""

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if timeout_seconds:
            error_details["timeout_seconds"] = timeout_seconds
        super().__init__(
            message="LLM request timed out",
            code=ErrorCode.LLM_TIMEOUT,
            details=error_details,
        )


class LLMResponseInvalidError(LLMError):
    """Raised when the LLM returns no usable content."""

    def __init__(
        self,
        message: str = "Empty response from LLM",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.LLM_RESPONSE_INVALID,
            details=details,
        )


class StorageError(GoTrainError):
    """Raised when the local session database fails."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if operation:
            error_details["operation"] = operation
        super().__init__(
            message=message,
            code=ErrorCode.DATABASE_ERROR,
            details=error_details,
        )
