"""Plan operation model (explicit fields; no args dict)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from crashidsync.models import RemoteRecord

from .actions import Action


@dataclass(slots=True)
class PlanOperation:
    """
    A single operation within a ReconciliationPlan.

    UPSERT carries the generated record content; DELETE carries the observed
    record it removes.
    """

    op_id: str
    seq: int
    action: Action
    record_id: str

    description: Optional[str] = None
    hashes: list[str] = field(default_factory=list)
    record: Optional[RemoteRecord] = None

    def validate_required_fields(self) -> None:
        """Validate required fields according to action. Raises ValueError."""
        _require(self.record_id, "record_id")

        if self.action is Action.UPSERT:
            _require(self.description, "description")
            return

        if self.action is Action.DELETE:
            if self.record is None:
                raise ValueError("Missing required field: record")
            if self.record.id != self.record_id:
                raise ValueError("record.id does not match record_id")
            return

        raise ValueError(f"Unsupported action: {self.action}")


def _require(value: object, field_name: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"Missing required field: {field_name}")
