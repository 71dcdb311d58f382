"""
Error management module.
"""
import json
import logging
import traceback
from enum import Enum
from typing import Any, Dict, Optional


class ErrorType(Enum):
    """Error classification types."""
    NO_RESULTS = "no_results"
    INVALID_OPTIONS = "invalid_options"
    LOGIC_ERROR = "logic_error"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"


class CyyncError(Exception):
    """Base exception for CYYNC lookup errors."""

    def __init__(self, message: str, error_type: ErrorType = ErrorType.UNKNOWN, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_type = error_type
        self.details = details or {}

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "error_type": self.error_type.value,
            "message": str(self),
            "details": self.details,
        }


class TransportError(CyyncError):
    """
    Failure reported by the request transport.

    ``status`` is the HTTP status code (None for connection-level failures) and
    ``description`` the raw response body, usually JSON.
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        description: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_type=ErrorType.NETWORK_ERROR, details=details)
        self.status = status
        self.description = description

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["status"] = self.status
        return data


class CyyncLookupError(CyyncError):
    """Single readable error surfaced to lookup callers."""

    def __init__(self, detail: str, err: Dict[str, Any], error_type: ErrorType = ErrorType.UNKNOWN, status: Optional[int] = None):
        super().__init__(detail, error_type=error_type, details=err)
        self.detail = detail
        self.err = err
        self.status = status

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detail": self.detail,
            "status": self.status,
            "err": self.err,
        }


def _description_detail(description: Optional[str]) -> Optional[str]:
    """Pull ``message`` or ``error`` out of a JSON response body."""
    if not description:
        return None
    try:
        body = json.loads(description)
    except (TypeError, ValueError):
        return None
    if not isinstance(body, dict):
        return None
    detail = body.get("message") or body.get("error")
    return str(detail) if detail else None


def format_transport_failure(message: str, status: Optional[int], description: Optional[str] = None) -> str:
    """
    Build the readable transport failure text.

    "<message> - (<status>)| <detail>" when the body carries a message/error
    field, "<message> - (<status>)" otherwise.
    """
    if status is None:
        return message
    text = f"{message} - ({status})"
    detail = _description_detail(description)
    if detail:
        text = f"{text}| {detail}"
    return text


def translate_transport_error(error: TransportError) -> TransportError:
    """Return a TransportError whose message follows ``format_transport_failure``."""
    translated = TransportError(
        format_transport_failure(str(error), error.status, error.description),
        status=error.status,
        description=error.description,
        details=error.details,
    )
    translated.__cause__ = error
    return translated


def parse_error_to_readable_json(error: BaseException) -> Dict[str, Any]:
    """Flatten an exception into a JSON-friendly dictionary."""
    readable: Dict[str, Any] = {
        "name": type(error).__name__,
        "message": str(error),
    }
    for attr in ("status", "description"):
        value = getattr(error, attr, None)
        if value is not None:
            readable[attr] = value
    if isinstance(error, CyyncError):
        readable["error_type"] = error.error_type.value
        if error.details:
            readable["details"] = error.details
    if error.__traceback__ is not None:
        readable["stack"] = "".join(traceback.format_tb(error.__traceback__))
    return readable


def classify_error(error: Exception) -> ErrorType:
    """
    Classify error type from exception.

    Args:
        error: Exception instance

    Returns:
        ErrorType enum value
    """
    if isinstance(error, CyyncError) and error.error_type is not ErrorType.UNKNOWN:
        return error.error_type

    error_str = str(error).lower()
    error_type = type(error).__name__.lower()

    if any(keyword in error_str for keyword in ["invalid", "validation", "option", "required"]):
        return ErrorType.INVALID_OPTIONS

    if any(keyword in error_str or keyword in error_type for keyword in ["network", "connection", "timeout", "http", "request"]):
        return ErrorType.NETWORK_ERROR

    if any(keyword in error_str or keyword in error_type for keyword in ["logic", "index", "key", "attribute", "type"]):
        return ErrorType.LOGIC_ERROR

    return ErrorType.UNKNOWN


def log_error(
    error: Exception,
    logger: Optional[logging.Logger] = None,
    context: Optional[Dict[str, Any]] = None,
    level: str = "ERROR",
) -> Dict[str, Any]:
    """
    Log error with context and return error info.

    Args:
        error: Exception instance
        logger: Logger instance (if None, uses default)
        context: Additional context information
        level: Logging level

    Returns:
        Dictionary with error information
    """
    if logger is None:
        logger = logging.getLogger("cyync")

    error_type = classify_error(error)
    error_info = {
        "error_type": error_type.value,
        "error_class": type(error).__name__,
        "message": str(error),
        "context": context or {},
    }

    log_method = getattr(logger, level.lower(), logger.error)
    log_method(
        f"[{error_type.value}] {type(error).__name__}: {error}",
        extra={"error_info": error_info, "context": context},
    )

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Traceback:\n{''.join(traceback.format_exception(type(error), error, error.__traceback__))}")

    return error_info

