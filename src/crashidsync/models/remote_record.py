"""Data model for records stored in the Remote Settings collection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(slots=True)
class RemoteRecord:
    """A record as observed in the remote collection. `id` is its only identity."""

    id: str
    description: str = ""
    hashes: list[str] = field(default_factory=list)
    last_modified: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RemoteRecord":
        """Build a record from one entry of a `GET /records` `data` array."""
        record_id = data.get("id")
        if not isinstance(record_id, str) or not record_id:
            raise ValueError("record is missing a string 'id'")

        description = data.get("description", "")
        hashes = data.get("hashes", []) or []
        last_modified = data.get("last_modified")

        return cls(
            id=record_id,
            description=description if isinstance(description, str) else "",
            hashes=list(hashes) if isinstance(hashes, list) else [],
            last_modified=last_modified if isinstance(last_modified, int) else None,
        )
