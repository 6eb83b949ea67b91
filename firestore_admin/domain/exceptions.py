"""Exceptions raised by the Firestore admin client.

Encode-time failures abort the current operation before any request is
sent. Errors reported by the Firestore service are modelled as RemoteError
but are logged rather than raised by the client (see report_remote_error).
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class FirestoreAdminException(Exception):
    """Base exception for all firestore_admin errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class UnsupportedTypeError(FirestoreAdminException):
    """Raised when a native value has no Firestore wire representation."""

    def __init__(self, type_name: str) -> None:
        """Initialize with the offending runtime type name.

        Args:
            type_name: Name of the value's type (e.g. 'set', 'bytes').
        """
        self.type_name = type_name
        super().__init__(
            f"Unsupported value type: {type_name}",
            "UNSUPPORTED_TYPE",
            {"type": type_name},
        )


class RemoteError(FirestoreAdminException):
    """Structured error returned by the Firestore REST API."""

    def __init__(
        self,
        code: int | None,
        message: str,
        status: str | None = None,
        details: list[Any] | None = None,
        call: str | None = None,
    ) -> None:
        self.code = code
        self.status = status
        self.call = call
        extra: dict[str, Any] = {"code": code}
        if status:
            extra["status"] = status
        if details:
            extra["details"] = details
        if call:
            extra["call"] = call
        super().__init__(message, "REMOTE_ERROR", extra)

    @classmethod
    def from_payload(cls, error: Any, call: str | None = None) -> "RemoteError":
        """Build from the ``error`` object of a Firestore response body."""
        if not isinstance(error, dict):
            return cls(None, str(error), call=call)
        return cls(
            error.get("code"),
            error.get("message") or "",
            status=error.get("status"),
            details=error.get("details"),
            call=call,
        )


class InvalidQueryError(FirestoreAdminException):
    """Raised when a query names an unknown operator or sort direction."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "INVALID_QUERY", details)


class ConfigurationError(FirestoreAdminException):
    """Raised when the service account configuration is missing or invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIGURATION_ERROR")


def report_remote_error(error: Any, call: str) -> RemoteError:
    """Log a Firestore error body and return it as a RemoteError.

    The caller decides what to do next; nothing is raised here.

    Args:
        error: The ``error`` object from the response body.
        call: Name of the operation (or URL) that received it.

    Returns:
        The RemoteError describing the failure.
    """
    exc = RemoteError.from_payload(error, call=call)
    logger.error(
        "Firestore call failed: call=%s code=%s status=%s message=%s",
        call,
        exc.code,
        exc.status,
        exc.message,
    )
    if "details" in exc.details:
        logger.error("Firestore error details for %s: %s", call, exc.details["details"])
    return exc
