"""Target-state sources for crashidsync."""

from __future__ import annotations

from crashidsync.config import Settings

from .archive import ArchiveSignatureSource, crash_ids_filename
from .base import SignatureSource
from .bigquery import TOP_CRASH_QUERY_PARAMS, BigQuerySignatureSource


def build_source(settings: Settings) -> SignatureSource:
    """Return the source selected by `settings.source`."""
    if settings.source == "archive":
        return ArchiveSignatureSource(settings)
    return BigQuerySignatureSource(settings)


__all__ = [
    "SignatureSource",
    "BigQuerySignatureSource",
    "ArchiveSignatureSource",
    "TOP_CRASH_QUERY_PARAMS",
    "build_source",
    "crash_ids_filename",
]
