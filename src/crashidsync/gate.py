"""Change-detection gate: decide whether a run needs to rebuild target state."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from crashidsync.sources.base import SignatureSource

logger = logging.getLogger(__name__)


def should_proceed(
    last_modified: Optional[datetime],
    force_update: bool,
    source: SignatureSource,
) -> bool:
    """
    Return True if reconciliation work is needed.

    Order:
        - force_update -> proceed
        - no marker (first run) -> proceed
        - otherwise ask the source whether data changed since the marker

    Only the cheap freshness check is delegated; the target state is never built here.
    """
    if force_update:
        logger.info("Forced update requested")
        return True

    if last_modified is None:
        logger.info("No previous modification time; first run")
        return True

    if source.new_data_since(last_modified):
        logger.info("New crash data since last update (%s)", last_modified.isoformat())
        return True

    logger.info(
        "No changes necessary: crash ids not modified since last update (%s)",
        last_modified.isoformat(),
    )
    return False
