"""Target-state model produced by signature sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(slots=True)
class SignatureGroup:
    """
    One top-crasher partition and the minidump hashes collected for it.

    Notes:
        - `signature_key` identifies the group inside its source only; it is not
          stable across runs. Record ids come from iteration order instead.
        - `signature` is the human-readable text embedded in record descriptions.
        - `hashes` is kept as given (duplicates are not removed).
    """

    signature_key: str
    signature: Any
    process_type: str
    channel: str
    os: Optional[str] = None
    hashes: list[Any] = field(default_factory=list)
