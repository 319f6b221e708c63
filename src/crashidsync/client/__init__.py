"""Remote collection client exports for crashidsync."""

from __future__ import annotations

from .dry_run import DRY_RUN_PREFIX, dry_runnable
from .remote_settings import STATUS_TO_REVIEW, STATUS_TO_SIGN, RemoteSettingsClient

__all__ = [
    "RemoteSettingsClient",
    "dry_runnable",
    "DRY_RUN_PREFIX",
    "STATUS_TO_REVIEW",
    "STATUS_TO_SIGN",
]
