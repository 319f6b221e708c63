"""CrashIdSyncManager: orchestrates fetch -> gate -> plan -> apply -> finalize."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from crashidsync.client import RemoteSettingsClient
from crashidsync.config import Settings
from crashidsync.errors import MalformedInputError, TransportError
from crashidsync.finalize import finalize
from crashidsync.gate import should_proceed
from crashidsync.models import OperationResult, RemoteRecord, SyncResult
from crashidsync.plan import Action, PlanOperation, ReconciliationPlan, compute_plan
from crashidsync.sources import SignatureSource, build_source

logger = logging.getLogger(__name__)


class CrashIdSyncManager:
    """High-level reconciler for one run: Plan -> Apply -> Finalize."""

    def __init__(
        self,
        settings: Settings,
        *,
        client: Optional[RemoteSettingsClient] = None,
        source: Optional[SignatureSource] = None,
    ) -> None:
        self._settings = settings
        self._client = client if client is not None else RemoteSettingsClient(settings)
        self._source = source if source is not None else build_source(settings)

    def run(self) -> SyncResult:
        """
        Reconcile the remote collection with the current top crashers.

        Policy:
            - Raise on fatal errors: initial fetch, malformed target state,
              bulk teardown failure.
            - Individual upsert/delete failures are recorded; the run continues.
            - Finalize (approve/review) is best effort.
        """
        observed, last_modified = self._client.fetch_all()

        if not should_proceed(last_modified, self._settings.force_update, self._source):
            return SyncResult(status="skipped", last_modified=last_modified)

        plan = compute_plan(self._source.iter_groups(), observed)
        logger.info(
            "Planned %d upserts and %d deletes (%d hashes)",
            len(plan.upserts),
            len(plan.deletes),
            plan.total_hashes,
        )

        if not plan.upserts:
            results = self._teardown(plan, observed)
        else:
            results = self.apply_plan(plan)

        summary = _summarize_results(results)
        summary["unchanged"] = len(plan.unchanged_upserts(observed))
        summary["hashes"] = plan.total_hashes

        status = "partial" if summary["failed"] else "success"
        if status == "partial":
            logger.warning("%d operations failed; collection may not match top crashers", summary["failed"])
        else:
            logger.info("Crash id lists synced")

        finalized = finalize(self._client, self._settings.environment)

        return SyncResult(
            status=status,  # type: ignore[arg-type]
            results=results,
            plan_id=plan.plan_id,
            last_modified=last_modified,
            finalized=finalized,
            summary=summary,
        )

    def apply_plan(self, plan: ReconciliationPlan) -> list[OperationResult]:
        """
        Apply upserts then deletes.

        The delete phase starts only after every upsert has completed. Within a
        phase, operations may overlap when max_workers > 1; results keep plan order.
        """
        results = self._apply_phase(plan.upserts)
        results.extend(self._apply_phase(plan.deletes))
        return results

    # ----------------------------
    # Internals
    # ----------------------------
    def _apply_phase(self, ops: list[PlanOperation]) -> list[OperationResult]:
        workers = self._settings.max_workers
        if workers <= 1 or len(ops) <= 1:
            return [self._apply_one(op) for op in ops]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(self._apply_one, ops))

    def _apply_one(self, op: PlanOperation) -> OperationResult:
        try:
            op.validate_required_fields()
        except ValueError as exc:
            raise MalformedInputError(
                "Invalid operation: missing required fields",
                details={"op_id": op.op_id, "action": op.action.value},
                cause=exc,
            ) from exc

        try:
            if op.action is Action.UPSERT:
                ok = self._client.upsert(op.record_id, op.description, op.hashes)
            else:
                ok = self._client.delete(op.record)
        except TransportError as exc:
            logger.warning("%s %s failed: %s", op.action.value, op.record_id, exc)
            return _failed_result(op, exc.__class__.__name__, str(exc))

        if not ok:
            return _failed_result(op, "UnexpectedStatus", "remote returned an unexpected status")
        return _success_result(op)

    def _teardown(self, plan: ReconciliationPlan, observed: list[RemoteRecord]) -> list[OperationResult]:
        if not plan.deletes:
            return []
        if not self._settings.allow_empty:
            raise MalformedInputError(
                "Target state is empty; refusing to delete every record (set ALLOW_EMPTY=1 to allow)",
                details={"observed": len(observed)},
            )

        logger.warning("Target state is empty; deleting all %d records", len(plan.deletes))
        if not self._client.delete_all():
            raise TransportError(
                "Couldn't delete all records",
                details={"collection": self._settings.collection_endpoint},
            )
        return [_success_result(op) for op in plan.deletes]


def _success_result(op: PlanOperation) -> OperationResult:
    return OperationResult(
        op_id=op.op_id,
        seq=op.seq,
        action=op.action.value,
        record_id=op.record_id,
        status="success",
    )


def _failed_result(op: PlanOperation, error_type: str, error_message: str) -> OperationResult:
    return OperationResult(
        op_id=op.op_id,
        seq=op.seq,
        action=op.action.value,
        record_id=op.record_id,
        status="failed",
        error_type=error_type,
        error_message=error_message,
    )


def _summarize_results(results: list[OperationResult]) -> dict[str, int]:
    summary: dict[str, int] = {"upserted": 0, "deleted": 0, "failed": 0}
    for r in results:
        if r.status == "failed":
            summary["failed"] += 1
        elif r.action == Action.UPSERT.value:
            summary["upserted"] += 1
        else:
            summary["deleted"] += 1
    return summary
