"""Dry-run support for mutating client operations."""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, TypeVar, Union

logger = logging.getLogger(__name__)

DRY_RUN_PREFIX: str = "[DRY_RUN]"

F = TypeVar("F", bound=Callable[..., Any])
Describe = Union[str, Callable[..., str]]


def dry_runnable(describe: Describe) -> Callable[[F], F]:
    """
    Wrap a mutating method so it only logs its intent when dry-run is enabled.

    The owning object must expose a boolean `dry_run` attribute. `describe` is
    either a fixed message or a callable receiving the method's arguments
    (without self) and returning one.

    Dry-run: log "[DRY_RUN] <message>" and return True without calling the method.
    Otherwise: log "<message>" and delegate.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            message = describe(*args, **kwargs) if callable(describe) else describe
            if getattr(self, "dry_run", False):
                logger.info("%s %s", DRY_RUN_PREFIX, message)
                return True
            logger.info("%s", message)
            return func(self, *args, **kwargs)

        wrapper.__dry_runnable__ = True  # type: ignore[attr-defined]
        return wrapper  # type: ignore[return-value]

    return decorator
