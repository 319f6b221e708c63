"""Public error exports for crashidsync."""

from __future__ import annotations

from .exceptions import (
    ConfigurationError,
    CrashIdSyncError,
    ExternalToolError,
    MalformedInputError,
    TransportError,
)

__all__ = [
    "CrashIdSyncError",
    "ConfigurationError",
    "TransportError",
    "MalformedInputError",
    "ExternalToolError",
]
