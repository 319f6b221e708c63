"""Target-state source protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Iterator, Protocol, runtime_checkable

from crashidsync.models import SignatureGroup


@runtime_checkable
class SignatureSource(Protocol):
    """
    Producer of top-crasher SignatureGroups.

    `iter_groups()` must return a fresh, finite iterator on every call and yield
    groups in a deterministic order; record ids are assigned from that order.
    """

    def new_data_since(self, marker: datetime) -> bool:
        """Return True if upstream data changed after `marker`."""
        ...

    def iter_groups(self) -> Iterator[SignatureGroup]:
        ...
