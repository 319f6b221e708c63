"""Plan actions for crashidsync."""

from __future__ import annotations

from enum import Enum


class Action(str, Enum):
    """Supported plan actions."""

    UPSERT = "UPSERT"
    DELETE = "DELETE"
