"""Public plan exports for crashidsync."""

from __future__ import annotations

from .actions import Action
from .engine import build_description, compute_plan, validate_group
from .operation import PlanOperation
from .reconciliation_plan import ReconciliationPlan

__all__ = [
    "Action",
    "PlanOperation",
    "ReconciliationPlan",
    "build_description",
    "compute_plan",
    "validate_group",
]
