"""Structured exception hierarchy for the exporter.

Provides specific exception types for the failure modes of a listener run,
with rich context for debugging and troubleshooting.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "ExporterError",
    "ConfigurationError",
    "TransportError",
    "ConnectionError",
    "LifecycleError",
]


class ExporterError(Exception):
    """Base exception for all exporter errors.

    Provides structured error information for debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        self.suggestion = suggestion

        parts = [message]

        if details:
            detail_lines = [f"  {k}: {v}" for k, v in details.items()]
            parts.append("\nDetails:")
            parts.extend(detail_lines)

        if suggestion:
            parts.append(f"\nSuggestion: {suggestion}")

        super().__init__("\n".join(parts) if len(parts) > 1 else message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class ConfigurationError(ExporterError):
    """Error in listener configuration.

    Raised at setup when a parameter is invalid (bad samplers regex,
    unknown sender implementation, unreadable config file).
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        self.value = value

        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(message, details=details, **kwargs)


class TransportError(ExporterError):
    """Error raised by a metrics sender while delivering metrics.

    Never retried by the listener itself; retrying is the sender's concern.
    """

    def __init__(
        self,
        message: str,
        *,
        sender: Optional[str] = None,
        endpoint: Optional[str] = None,
        cause: Optional[BaseException] = None,
        **kwargs: Any,
    ) -> None:
        self.sender = sender
        self.endpoint = endpoint
        self.cause = cause

        details = kwargs.pop("details", {})
        if sender:
            details["sender"] = sender
        if endpoint:
            details["endpoint"] = endpoint
        if cause:
            details["cause"] = str(cause)
            details["cause_type"] = type(cause).__name__

        super().__init__(message, details=details, **kwargs)


class ConnectionError(TransportError):
    """Error setting up a sender against its endpoint.

    Raised when the endpoint is malformed or cannot be reached at setup.
    """

    def __init__(self, message: str, **kwargs: Any) -> None:
        suggestion = kwargs.pop("suggestion", None)
        if not suggestion:
            suggestion = (
                "Check the endpointUrl parameter, e.g. "
                "http://influx:8086/write?db=jmeter or udp://influx:8089."
            )
        super().__init__(message, suggestion=suggestion, **kwargs)


class LifecycleError(ExporterError):
    """Listener method called out of order.

    Raised when a batch arrives before setup, or setup/teardown run twice.
    """

    def __init__(
        self,
        message: str,
        *,
        state: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self.state = state
        self.operation = operation

        details = kwargs.pop("details", {})
        if state:
            details["state"] = state
        if operation:
            details["operation"] = operation

        super().__init__(message, details=details, **kwargs)
