"""Error handling for read-along.

Provides:
- Custom exception hierarchy with error categories
- User-facing messages for speech recognition failures
- Display formatting for the CLI
"""

from __future__ import annotations

from enum import Enum

# Error code reported by the recognition engine when it cannot reach its service
NETWORK_ERROR_CODE = "network"

CAPABILITY_ABSENT_MESSAGE = "Speech recognition is not supported in this environment."

NETWORK_ERROR_MESSAGE = (
    "Network error: Speech recognition requires an internet connection and a "
    "supported recognition service. Please check your connection and try again."
)


class ErrorCategory(str, Enum):
    """Categories of errors for handling decisions."""

    VALIDATION = "validation"  # Bad input - don't retry
    CONFIGURATION = "configuration"  # Bad config - don't retry
    RESOURCE = "resource"  # Missing file/resource - don't retry
    CAPABILITY = "capability"  # Recognition engine absent - listening disabled
    EXTERNAL = "external"  # Engine-reported failure - may retry
    INTERNAL = "internal"  # Bug in code - don't retry


class ReadAlongError(Exception):
    """Base exception for read-along errors.

    Attributes:
        message: Human-readable error message
        category: Error category for handling
        context: Additional context information
        recoverable: Whether the error is recoverable
    """

    category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        context: dict | None = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} (context: {self.context})"
        return self.message


class ValidationError(ReadAlongError):
    """Input validation error.

    Examples: word index outside the passage, mismatched state collection.
    """

    category = ErrorCategory.VALIDATION

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message, context, recoverable=False)


class ConfigurationError(ReadAlongError):
    """Configuration error.

    Examples: malformed config file, empty passage list.
    """

    category = ErrorCategory.CONFIGURATION

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message, context, recoverable=False)


class ResourceError(ReadAlongError):
    """Resource not found or unavailable.

    Examples: missing config file, missing replay script.
    """

    category = ErrorCategory.RESOURCE

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message, context, recoverable=False)


class RecognitionUnavailableError(ReadAlongError):
    """The speech recognition engine is not available in this environment."""

    category = ErrorCategory.CAPABILITY

    def __init__(self, message: str = CAPABILITY_ABSENT_MESSAGE, context: dict | None = None):
        super().__init__(message, context, recoverable=False)


class EngineError(ReadAlongError):
    """Failure reported by the speech recognition engine.

    Attributes:
        code: Machine-readable error code from the engine
    """

    category = ErrorCategory.EXTERNAL

    def __init__(self, code: str, context: dict | None = None):
        super().__init__(describe_recognition_error(code), context, recoverable=True)
        self.code = code


def describe_recognition_error(code: str) -> str:
    """Turn an engine error code into a user-facing message.

    The network case gets an expanded remediation message; every other
    code is shown verbatim behind a generic prefix.
    """
    if code == NETWORK_ERROR_CODE:
        return NETWORK_ERROR_MESSAGE
    return f"Error: {code}"


def format_error_for_display(error: Exception) -> str:
    """Format an error message for user display.

    Args:
        error: Error to format

    Returns:
        Human-readable error message
    """
    if isinstance(error, ReadAlongError):
        category = error.category.value
        if error.context:
            context_str = ", ".join(f"{k}={v}" for k, v in error.context.items())
            return f"[{category}] {error.message} ({context_str})"
        return f"[{category}] {error.message}"

    return f"[error] {type(error).__name__}: {error}"
