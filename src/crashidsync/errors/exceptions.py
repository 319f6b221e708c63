"""Exception hierarchy for crashidsync."""

from __future__ import annotations

from typing import Any, Optional


class CrashIdSyncError(Exception):
    """
    Base exception for crashidsync.

    Attributes:
        details: Optional structured information (e.g., HTTP status, signature).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class ConfigurationError(CrashIdSyncError):
    """Raised when a required setting is missing or invalid (before any I/O)."""


class TransportError(CrashIdSyncError):
    """Raised when an HTTP call fails or returns a status outside its accepted set."""

    @classmethod
    def from_response(cls, response: Any, message: str) -> "TransportError":
        """Build a TransportError carrying status, reason and body of `response`."""
        status_code = getattr(response, "status_code", None)
        reason = getattr(response, "reason", None)
        body = _safe_text(response)
        return cls(
            f'{message}: "[{status_code}] {reason}"',
            details={
                "status_code": status_code,
                "reason": reason,
                "body": body,
            },
        )


class MalformedInputError(CrashIdSyncError):
    """Raised when target-state data fails shape validation."""


class ExternalToolError(CrashIdSyncError):
    """Raised when an external tool (e.g. tar) exits with a non-zero status."""


def _safe_text(response: Any) -> Optional[str]:
    text = getattr(response, "text", None)
    if isinstance(text, str):
        return text[:1000]
    return None
