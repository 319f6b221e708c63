"""crashidsync public API."""

from __future__ import annotations

from crashidsync.auth import AuthInfo
from crashidsync.client import RemoteSettingsClient, dry_runnable
from crashidsync.config import VALID_ENVIRONMENTS, Settings
from crashidsync.errors import (
    ConfigurationError,
    CrashIdSyncError,
    ExternalToolError,
    MalformedInputError,
    TransportError,
)
from crashidsync.finalize import finalize
from crashidsync.gate import should_proceed
from crashidsync.manager import CrashIdSyncManager
from crashidsync.models import OperationResult, RemoteRecord, SignatureGroup, SyncResult
from crashidsync.plan import Action, PlanOperation, ReconciliationPlan, compute_plan
from crashidsync.sources import ArchiveSignatureSource, BigQuerySignatureSource, SignatureSource

__all__ = [
    # High-level
    "CrashIdSyncManager",
    "Settings",
    "VALID_ENVIRONMENTS",
    "AuthInfo",
    # Components
    "RemoteSettingsClient",
    "dry_runnable",
    "should_proceed",
    "compute_plan",
    "finalize",
    # Sources
    "SignatureSource",
    "BigQuerySignatureSource",
    "ArchiveSignatureSource",
    # Plan / Models
    "Action",
    "PlanOperation",
    "ReconciliationPlan",
    "SignatureGroup",
    "RemoteRecord",
    "OperationResult",
    "SyncResult",
    # Errors
    "CrashIdSyncError",
    "ConfigurationError",
    "TransportError",
    "MalformedInputError",
    "ExternalToolError",
]
