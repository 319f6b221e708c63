"""Authorization information for the Remote Settings writer API."""

from __future__ import annotations

import base64
from dataclasses import dataclass

BEARER_PREFIX: str = "Bearer "
BASIC_PREFIX: str = "Basic "


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    Raw authorization credential.

    `credential` is either a ready-made bearer value ("Bearer XXXX") or a
    "user:password" pair that is sent with the basic scheme.
    """

    credential: str

    def __post_init__(self) -> None:
        if not isinstance(self.credential, str) or not self.credential.strip():
            raise ValueError("AuthInfo.credential must be a non-empty string")

    @property
    def is_bearer(self) -> bool:
        return self.credential.startswith(BEARER_PREFIX)

    @property
    def header_value(self) -> str:
        """Value for the Authorization header."""
        if self.is_bearer:
            return self.credential
        encoded = base64.b64encode(self.credential.encode("utf-8")).decode("ascii")
        return f"{BASIC_PREFIX}{encoded}"

    def __repr__(self) -> str:
        scheme = "bearer" if self.is_bearer else "basic"
        return f"AuthInfo(scheme={scheme!r}, credential='***')"
