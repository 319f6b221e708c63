"""ReconciliationPlan model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from crashidsync.models import RemoteRecord

from .operation import PlanOperation


@dataclass(slots=True)
class ReconciliationPlan:
    """
    Upserts (one per SignatureGroup, in assignment order) and deletes (observed
    records whose id was not generated).
    """

    plan_id: str
    created_at: datetime
    upserts: list[PlanOperation]
    deletes: list[PlanOperation]

    @property
    def operations(self) -> list[PlanOperation]:
        """All operations, upserts first."""
        return self.upserts + self.deletes

    @property
    def apply_order(self) -> list[str]:
        return [op.op_id for op in self.operations]

    @property
    def generated_ids(self) -> set[str]:
        return {op.record_id for op in self.upserts}

    @property
    def deleted_ids(self) -> set[str]:
        return {op.record_id for op in self.deletes}

    @property
    def total_hashes(self) -> int:
        return sum(len(op.hashes) for op in self.upserts)

    def is_empty(self) -> bool:
        return not self.upserts and not self.deletes

    def resulting_ids(self, observed: Iterable[RemoteRecord]) -> set[str]:
        """Id set of the collection once this plan has been applied to `observed`."""
        ids = {record.id for record in observed}
        ids -= self.deleted_ids
        ids |= self.generated_ids
        return ids

    def unchanged_upserts(self, observed: Iterable[RemoteRecord]) -> list[PlanOperation]:
        """Upserts whose description and hashes already match the stored record."""
        by_id = {record.id: record for record in observed}
        unchanged: list[PlanOperation] = []
        for op in self.upserts:
            current = by_id.get(op.record_id)
            if current is None:
                continue
            if current.description == op.description and current.hashes == op.hashes:
                unchanged.append(op)
        return unchanged
