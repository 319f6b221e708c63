"""Remote Settings collection client (records CRUD + review workflow)."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, Optional

import requests

from crashidsync.config import Settings
from crashidsync.errors import TransportError
from crashidsync.models import RemoteRecord
from crashidsync.util.time import parse_http_date

from .dry_run import dry_runnable

logger = logging.getLogger(__name__)

STATUS_TO_REVIEW: str = "to-review"
STATUS_TO_SIGN: str = "to-sign"


class RemoteSettingsClient:
    """
    Typed operations against one Remote Settings collection.

    Notes:
        - `fetch_all` raises TransportError on anything but 200.
        - Mutations return False (and log a warning) on an unexpected status;
          network failures raise TransportError.
        - With `dry_run`, mutations log and return True without any request.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.dry_run = settings.dry_run
        self.collection_endpoint = settings.collection_endpoint
        self.records_endpoint = settings.records_endpoint
        self._timeout = settings.request_timeout

        self._session = session if session is not None else requests.Session()
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                "Authorization": settings.auth_info.header_value,
            }
        )

    # ----------------------------
    # Read path
    # ----------------------------
    def fetch_all(self) -> tuple[list[RemoteRecord], Optional[datetime]]:
        """
        Get the existing records and the collection's last modification time.

        Raises:
            TransportError: on non-200 status, network failure or a bad payload.
        """
        logger.info("Get existing data from %s", self.collection_endpoint)
        response = self._request("GET", self.records_endpoint)
        if response.status_code != 200:
            raise TransportError.from_response(response, "Can't retrieve records")

        try:
            payload = response.json()
            records = [RemoteRecord.from_dict(item) for item in payload["data"]]
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise TransportError(
                "Malformed records payload",
                details={"url": self.records_endpoint},
                cause=exc,
            ) from exc

        last_modified = _parse_last_modified(response.headers.get("Last-Modified"))
        logger.debug("Fetched %d records (last modified: %s)", len(records), last_modified)
        return records, last_modified

    # ----------------------------
    # Mutations
    # ----------------------------
    @dry_runnable(lambda record_id, description, hashes: f"Create {record_id} ({description})")
    def upsert(self, record_id: str, description: str, hashes: Iterable[str]) -> bool:
        """Create or replace a record. Accepts 200 (updated) and 201 (created)."""
        response = self._request(
            "PUT",
            f"{self.records_endpoint}/{record_id}",
            json={"data": {"description": description, "hashes": list(hashes)}},
        )
        return _check_status(response, (200, 201), "Couldn't create record")

    @dry_runnable(lambda record: f"Delete {record.id} ({record.description})")
    def delete(self, record: RemoteRecord) -> bool:
        """Remove one record. Accepts 200."""
        response = self._request("DELETE", f"{self.records_endpoint}/{record.id}")
        return _check_status(response, (200,), "Couldn't delete record")

    @dry_runnable("Delete all records")
    def delete_all(self) -> bool:
        """Remove every record of the collection. Accepts 200."""
        response = self._request("DELETE", self.records_endpoint)
        return _check_status(response, (200,), "Couldn't delete all records")

    @dry_runnable("Requesting review")
    def request_review(self) -> bool:
        """Move the collection to the review workflow state."""
        return self._set_status(STATUS_TO_REVIEW, "Couldn't request review")

    @dry_runnable("Approving changes")
    def approve(self) -> bool:
        """Approve (sign) pending changes. Only the self-approving environment allows this."""
        return self._set_status(STATUS_TO_SIGN, "Couldn't approve changes")

    # ----------------------------
    # Internals
    # ----------------------------
    def _set_status(self, status: str, error_message: str) -> bool:
        response = self._request(
            "PATCH",
            self.collection_endpoint,
            json={"data": {"status": status}},
        )
        return _check_status(response, (200,), error_message)

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            return self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(
                f"{method} {url} failed",
                details={"method": method, "url": url},
                cause=exc,
            ) from exc


def _check_status(
    response: requests.Response,
    expected: tuple[int, ...],
    error_message: str,
) -> bool:
    if response.status_code in expected:
        return True
    logger.warning(
        '%s: "[%s] %s" %s',
        error_message,
        response.status_code,
        response.reason,
        response.text,
    )
    return False


def _parse_last_modified(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return parse_http_date(value)
    except ValueError:
        logger.warning("Ignoring unparseable Last-Modified header: %r", value)
        return None
