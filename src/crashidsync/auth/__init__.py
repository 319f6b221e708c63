"""Public auth exports for crashidsync."""

from __future__ import annotations

from .auth_info import AuthInfo

__all__ = ["AuthInfo"]
