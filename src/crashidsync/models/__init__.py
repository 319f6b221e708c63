"""Public model exports for crashidsync."""

from __future__ import annotations

from .remote_record import RemoteRecord
from .results import OperationResult, OperationStatus, SyncResult, SyncStatus
from .signature_group import SignatureGroup

__all__ = [
    "SignatureGroup",
    "RemoteRecord",
    "OperationStatus",
    "SyncStatus",
    "OperationResult",
    "SyncResult",
]
