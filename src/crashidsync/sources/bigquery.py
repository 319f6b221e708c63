"""Signature source backed by the crash ping BigQuery tables."""

from __future__ import annotations

import logging
from datetime import datetime
from importlib import resources
from pathlib import Path
from typing import Any, Iterator

from crashidsync.config import Settings
from crashidsync.errors import ConfigurationError
from crashidsync.models import SignatureGroup
from crashidsync.util.time import normalize_dt

logger = logging.getLogger(__name__)

INGEST_TABLE: str = "moz-fx-data-shared-prod.crash_ping_ingest_external.ingest_output"

NEW_DATA_QUERY: str = f"""
select COUNT(*) as count
from `{INGEST_TABLE}`
where submission_timestamp >= @date
"""

TOP_CRASH_QUERY_PARAMS: dict[str, int] = {
    # Period over which we count signature reports.
    "report_interval_days": 30,
    # Period over which we count signature ping clients.
    "ping_interval_days": 7,
    # Take the top N signatures by client count.
    "top_crasher_count": 10,
    # The minimum number of reports for a signature to disqualify it.
    "report_minimum": 10,
    # The maximum number of hashes to select for a particular signature and platform.
    "max_hashes_per_config": 100,
}

_QUERY_RESOURCE: str = "top_crash_signatures.sql"
BIGQUERY_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/bigquery",)


class BigQuerySignatureSource:
    """Runs the freshness and top-crash queries against BigQuery."""

    def __init__(self, settings: Settings, *, client: Any = None) -> None:
        self._project = settings.bigquery_project
        self._query_file = settings.query_file
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            bigquery = _import_bigquery()
            credentials = _default_credentials()
            self._client = bigquery.Client(project=self._project, credentials=credentials)
        return self._client

    def new_data_since(self, marker: datetime) -> bool:
        date = normalize_dt(marker)
        rows = self._query(NEW_DATA_QUERY, {"date": date})
        count = int(rows[0]["count"]) if rows else 0
        logger.debug("%d crash pings ingested since %s", count, date.isoformat())
        return count > 0

    def iter_groups(self) -> Iterator[SignatureGroup]:
        rows = self._query(self.load_query(), TOP_CRASH_QUERY_PARAMS)
        logger.info("Top crash query returned %d signature groups", len(rows))
        return (_row_to_group(row) for row in rows)

    def load_query(self) -> str:
        """Return the top-crash SQL (QUERY_FILE override, else the packaged query)."""
        if self._query_file:
            return Path(self._query_file).read_text(encoding="utf-8")
        return (
            resources.files("crashidsync.sources")
            .joinpath("sql")
            .joinpath(_QUERY_RESOURCE)
            .read_text(encoding="utf-8")
        )

    def _query(self, query: str, params: dict[str, Any]) -> list[Any]:
        bigquery = _import_bigquery()
        job_config = bigquery.QueryJobConfig(
            query_parameters=[_scalar_parameter(bigquery, name, value) for name, value in params.items()]
        )
        job = self.client.query(query, job_config=job_config)
        return list(job.result())


def _scalar_parameter(bigquery: Any, name: str, value: Any) -> Any:
    if isinstance(value, datetime):
        return bigquery.ScalarQueryParameter(name, "TIMESTAMP", value)
    if isinstance(value, bool):
        return bigquery.ScalarQueryParameter(name, "BOOL", value)
    if isinstance(value, int):
        return bigquery.ScalarQueryParameter(name, "INT64", value)
    return bigquery.ScalarQueryParameter(name, "STRING", value)


def _row_to_group(row: Any) -> SignatureGroup:
    signature = row["signature"]
    process_type = row["process_type"]
    channel = row["channel"]
    os_name = row["os"]
    hashes = row["minidump_hashes"]
    return SignatureGroup(
        signature_key=f"{process_type}:{channel}:{os_name}:{signature}",
        signature=signature,
        process_type=process_type,
        channel=channel,
        os=os_name,
        hashes=list(hashes) if isinstance(hashes, (list, tuple)) else hashes,
    )


def _import_bigquery() -> Any:
    try:
        from google.cloud import bigquery
    except Exception as exc:  # pragma: no cover
        raise ConfigurationError(
            "google-cloud-bigquery is not available",
            details={"hint": "Install google-cloud-bigquery"},
            cause=exc,
        ) from exc
    return bigquery


def _default_credentials() -> Any:
    """Application default credentials (GOOGLE_APPLICATION_CREDENTIALS, gcloud, metadata server)."""
    try:
        import google.auth
        from google.auth.exceptions import DefaultCredentialsError
    except Exception as exc:  # pragma: no cover
        raise ConfigurationError(
            "google-auth is not available",
            details={"hint": "Install google-auth"},
            cause=exc,
        ) from exc

    try:
        credentials, _ = google.auth.default(scopes=list(BIGQUERY_SCOPES))
    except DefaultCredentialsError as exc:
        raise ConfigurationError(
            "Google credentials not found; set GOOGLE_APPLICATION_CREDENTIALS",
            cause=exc,
        ) from exc
    return credentials
