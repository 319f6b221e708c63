"""Reconciliation engine: target groups + observed records -> plan (no I/O)."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from crashidsync.errors import MalformedInputError
from crashidsync.models import RemoteRecord, SignatureGroup
from crashidsync.util.ids import make_record_id, new_op_id, new_plan_id
from crashidsync.util.time import now_utc

from .actions import Action
from .operation import PlanOperation
from .reconciliation_plan import ReconciliationPlan


def build_description(group: SignatureGroup) -> str:
    """
    Human-readable record label for a group.

    Format:
        "<process_type> (<os> <channel>): <signature>"
        "<process_type> (<channel>): <signature>"   when the group has no OS
    """
    if group.os:
        return f"{group.process_type} ({group.os} {group.channel}): {group.signature}"
    return f"{group.process_type} ({group.channel}): {group.signature}"


def validate_group(group: SignatureGroup) -> None:
    """
    Check the fields that flow into a record.

    Raises:
        MalformedInputError: if a description part or any hash is not a string.
    """
    for field_name in ("process_type", "channel", "signature"):
        if not isinstance(getattr(group, field_name), str):
            raise MalformedInputError(
                f"Non-string {field_name} in signature group {_label(group)}",
                details=_group_details(group, field=field_name),
            )

    if group.os is not None and not isinstance(group.os, str):
        raise MalformedInputError(
            f"Non-string os in signature group {_label(group)}",
            details=_group_details(group, field="os"),
        )

    if isinstance(group.hashes, (str, bytes)) or not isinstance(group.hashes, Sequence):
        raise MalformedInputError(
            f"Hashes must be a list of strings in signature group {_label(group)}",
            details=_group_details(group, field="hashes"),
        )

    for index, value in enumerate(group.hashes):
        if not isinstance(value, str):
            raise MalformedInputError(
                f"Non-string hash in signature group {_label(group)}",
                details=_group_details(group, field="hashes", index=index),
            )


def compute_plan(
    groups: Iterable[SignatureGroup],
    observed: Iterable[RemoteRecord],
) -> ReconciliationPlan:
    """
    Compute the operations that converge the collection to `groups`.

    Rules:
        - The n-th group (in iteration order) becomes record "id-<n:03d>".
        - One UPSERT per group, in assignment order.
        - One DELETE per observed record whose id was not generated, in
          observed order.

    Raises:
        MalformedInputError: if any group fails validation. No plan is
            returned in that case, so nothing from the run gets applied.
    """
    upserts: list[PlanOperation] = []
    used_ids: set[str] = set()

    for group in groups:
        validate_group(group)

        record_id = make_record_id(len(upserts))
        used_ids.add(record_id)
        upserts.append(
            PlanOperation(
                op_id=new_op_id(),
                seq=len(upserts),
                action=Action.UPSERT,
                record_id=record_id,
                description=build_description(group),
                hashes=list(group.hashes),
            )
        )

    deletes: list[PlanOperation] = []
    for record in observed:
        if record.id in used_ids:
            continue
        deletes.append(
            PlanOperation(
                op_id=new_op_id(),
                seq=len(upserts) + len(deletes),
                action=Action.DELETE,
                record_id=record.id,
                description=record.description,
                record=record,
            )
        )

    return ReconciliationPlan(
        plan_id=new_plan_id(),
        created_at=now_utc(),
        upserts=upserts,
        deletes=deletes,
    )


def _group_details(group: SignatureGroup, **extra: Any) -> dict[str, Any]:
    details: dict[str, Any] = {
        "process_type": group.process_type,
        "channel": group.channel,
        "signature": group.signature,
        "signature_key": group.signature_key,
    }
    details.update(extra)
    return details


def _label(group: SignatureGroup) -> str:
    return f"{group.process_type!r}/{group.channel!r}: {group.signature!r}"
