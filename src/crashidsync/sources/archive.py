"""Signature source backed by the crash-pings crash id archive."""

from __future__ import annotations

import json
import logging
import subprocess
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence

import requests

from crashidsync.config import Settings
from crashidsync.errors import ExternalToolError, MalformedInputError, TransportError
from crashidsync.models import SignatureGroup
from crashidsync.util.time import to_http_date

logger = logging.getLogger(__name__)

ARCHIVE_NAME: str = "crash-ids.tar.gz"


def crash_ids_filename(process_type: str, channel: str) -> str:
    return f"{process_type}_{channel}-crash-ids.json"


class ArchiveSignatureSource:
    """
    Downloads a tarball of `<process>_<channel>-crash-ids.json` files.

    Each file maps a signature key to `{"description": ..., "hashes": [...]}`.
    Groups are yielded channel by channel, process by process (configured
    order), and by sorted signature key within a file.

    A missing or unreadable per-process file is fatal (MalformedInputError):
    skipping it would plan deletes for that process's records.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[requests.Session] = None,
        tar_command: str = "tar",
    ) -> None:
        self._url = settings.archive_url
        self._processes: Sequence[str] = settings.processes
        self._channels: Sequence[str] = settings.channels
        self._timeout = settings.request_timeout
        self._session = session if session is not None else requests.Session()
        self._tar_command = tar_command
        self._archive: Optional[bytes] = None

    def new_data_since(self, marker: datetime) -> bool:
        """Conditional fetch: 304 means nothing new; 200 keeps the body for iter_groups()."""
        response = self._get({"If-Modified-Since": to_http_date(marker)})
        if response.status_code == 304:
            logger.debug("Crash id archive not modified since %s", marker.isoformat())
            return False
        if response.status_code != 200:
            raise TransportError.from_response(response, "Can't retrieve crash id archive")
        self._archive = response.content
        return True

    def iter_groups(self) -> Iterator[SignatureGroup]:
        archive = self._archive
        if archive is None:
            response = self._get({})
            if response.status_code != 200:
                raise TransportError.from_response(response, "Can't retrieve crash id archive")
            archive = self._archive = response.content
        return self._iter_archive(archive)

    # ----------------------------
    # Internals
    # ----------------------------
    def _get(self, headers: dict[str, str]) -> requests.Response:
        logger.info("Get top crashers from %s", self._url)
        try:
            return self._session.get(self._url, headers=headers, timeout=self._timeout)
        except requests.RequestException as exc:
            raise TransportError(
                f"GET {self._url} failed",
                details={"url": self._url},
                cause=exc,
            ) from exc

    def _iter_archive(self, archive: bytes) -> Iterator[SignatureGroup]:
        with tempfile.TemporaryDirectory(prefix="crashidsync-") as tmp:
            workdir = Path(tmp)
            archive_path = workdir / ARCHIVE_NAME
            archive_path.write_bytes(archive)

            extract_dir = workdir / "extracted"
            extract_dir.mkdir()
            self._unpack(archive_path, extract_dir)

            for channel in self._channels:
                for process_type in self._processes:
                    path = _find_file(extract_dir, crash_ids_filename(process_type, channel))
                    entries = _load_entries(path, process_type, channel)
                    for signature_key in sorted(entries):
                        yield _entry_to_group(signature_key, entries[signature_key], process_type, channel)

    def _unpack(self, archive_path: Path, extract_dir: Path) -> None:
        cmd = [self._tar_command, "-xzf", str(archive_path), "-C", str(extract_dir)]
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as exc:
            raise ExternalToolError(
                "Failed to run archive unpacker",
                details={"command": cmd},
                cause=exc,
            ) from exc

        if proc.returncode != 0:
            raise ExternalToolError(
                f"Archive unpacking exited with status {proc.returncode}",
                details={
                    "command": cmd,
                    "returncode": proc.returncode,
                    "stderr": proc.stderr.strip(),
                },
            )


def _find_file(root: Path, filename: str) -> Path:
    matches = sorted(root.rglob(filename))
    if not matches:
        raise MalformedInputError(
            "Crash id file missing from archive",
            details={"file": filename},
        )
    return matches[0]


def _load_entries(path: Path, process_type: str, channel: str) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        raise MalformedInputError(
            "Unreadable crash id file",
            details={"file": path.name, "process_type": process_type, "channel": channel},
            cause=exc,
        ) from exc

    if not isinstance(data, dict):
        raise MalformedInputError(
            "Crash id file must contain a JSON object",
            details={"file": path.name, "process_type": process_type, "channel": channel},
        )
    return data


def _entry_to_group(signature_key: str, entry: Any, process_type: str, channel: str) -> SignatureGroup:
    if not isinstance(entry, dict) or "description" not in entry or "hashes" not in entry:
        raise MalformedInputError(
            "Crash id entry must be an object with 'description' and 'hashes'",
            details={
                "process_type": process_type,
                "channel": channel,
                "signature": signature_key,
            },
        )
    return SignatureGroup(
        signature_key=signature_key,
        signature=entry["description"],
        process_type=process_type,
        channel=channel,
        os=None,
        hashes=entry["hashes"],
    )
