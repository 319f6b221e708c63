"""Result models for apply/sync operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Optional


OperationStatus = Literal["success", "failed"]
SyncStatus = Literal["success", "partial", "skipped"]


@dataclass(slots=True)
class OperationResult:
    """Result for a single operation (PlanOperation)."""

    op_id: str
    seq: int
    action: str
    record_id: str
    status: OperationStatus

    error_type: Optional[str] = None
    error_message: Optional[str] = None


@dataclass(slots=True)
class SyncResult:
    """Aggregate result for one reconciliation run."""

    status: SyncStatus
    results: list[OperationResult] = field(default_factory=list)

    plan_id: Optional[str] = None
    last_modified: Optional[datetime] = None
    finalized: bool = False
    summary: dict[str, int] = field(default_factory=dict)
