from __future__ import annotations

import uuid

RECORD_ID_PREFIX: str = "id-"


def new_uuid() -> str:
    """Generate a UUID4 string."""
    return str(uuid.uuid4())


def new_plan_id() -> str:
    """Generate a new ReconciliationPlan ID."""
    return new_uuid()


def new_op_id() -> str:
    """Generate a new PlanOperation ID."""
    return new_uuid()


def make_record_id(seq: int) -> str:
    """
    Return the deterministic record id for the seq-th group of a run.

    0 -> "id-000", 41 -> "id-041", 1000 -> "id-1000".
    """
    if not isinstance(seq, int) or isinstance(seq, bool) or seq < 0:
        raise ValueError("seq must be a non-negative int")
    return f"{RECORD_ID_PREFIX}{seq:03d}"
