"""Review/approval trigger run after a successful sync."""

from __future__ import annotations

import logging
from typing import Optional

from crashidsync.client import RemoteSettingsClient
from crashidsync.config import SELF_APPROVING_ENVIRONMENTS
from crashidsync.errors import TransportError

logger = logging.getLogger(__name__)


def finalize(client: RemoteSettingsClient, environment: Optional[str]) -> bool:
    """
    Approve changes in a self-approving environment, otherwise request review.

    Best effort: failure is logged and returned, never raised or retried.
    Record mutations already applied stay applied.
    """
    approving = environment in SELF_APPROVING_ENVIRONMENTS
    action = "approve changes" if approving else "request review"

    try:
        ok = client.approve() if approving else client.request_review()
    except TransportError as exc:
        logger.warning("Couldn't %s: %s; re-trigger it manually", action, exc)
        return False

    if not ok:
        logger.warning("Couldn't %s; re-trigger it manually", action)
        return False

    logger.info("Changes approved" if approving else "Review requested")
    return True
