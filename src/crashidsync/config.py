"""Run configuration for crashidsync, loaded explicitly from an environment mapping."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from crashidsync.auth import AuthInfo
from crashidsync.errors import ConfigurationError

VALID_ENVIRONMENTS: tuple[str, ...] = ("dev", "stage", "prod")
# Environments where the collection approves its own changes.
SELF_APPROVING_ENVIRONMENTS: frozenset[str] = frozenset({"dev"})
VALID_SOURCES: tuple[str, ...] = ("bigquery", "archive")

DEFAULT_BUCKET: str = "main-workspace"
DEFAULT_COLLECTION: str = "crash-reports-ondemand"
DEFAULT_ARCHIVE_URL: str = "https://crash-pings.mozilla.com/crash-ids.tar.gz"
DEFAULT_BIGQUERY_PROJECT: str = "moz-fx-data-shared-prod"
DEFAULT_PROCESSES: tuple[str, ...] = ("gpu", "gmplugin", "rdd", "socket", "utility")
DEFAULT_CHANNELS: tuple[str, ...] = ("nightly",)


@dataclass(slots=True, frozen=True)
class Settings:
    """
    All knobs for one reconciliation run.

    Required:
        - authorization: raw credential (bearer value or user:password)
        - server: writer server base URL (e.g. https://remote-settings.allizom.org/v1)
    """

    authorization: str
    server: str

    environment: Optional[str] = None
    dry_run: bool = False
    force_update: bool = False
    allow_empty: bool = False

    source: str = "bigquery"
    bucket: str = DEFAULT_BUCKET
    collection: str = DEFAULT_COLLECTION

    archive_url: str = DEFAULT_ARCHIVE_URL
    processes: tuple[str, ...] = DEFAULT_PROCESSES
    channels: tuple[str, ...] = DEFAULT_CHANNELS

    bigquery_project: str = DEFAULT_BIGQUERY_PROJECT
    query_file: Optional[str] = None

    max_workers: int = 1
    request_timeout: float = 30.0

    def __post_init__(self) -> None:
        if not isinstance(self.authorization, str) or not self.authorization.strip():
            raise ConfigurationError("AUTHORIZATION environment variable needs to be set")
        if not isinstance(self.server, str) or not self.server.strip():
            raise ConfigurationError("SERVER environment variable needs to be set")
        if self.environment is not None and self.environment not in VALID_ENVIRONMENTS:
            raise ConfigurationError(
                "ENVIRONMENT environment variable needs to be set to one of the "
                f"following values: {', '.join(VALID_ENVIRONMENTS)}",
                details={"environment": self.environment},
            )
        if self.source not in VALID_SOURCES:
            raise ConfigurationError(
                f"SOURCE must be one of: {', '.join(VALID_SOURCES)}",
                details={"source": self.source},
            )
        if not self.bucket or not self.collection:
            raise ConfigurationError("bucket and collection must be non-empty")
        if self.max_workers < 1:
            raise ConfigurationError(
                "MAX_WORKERS must be >= 1",
                details={"max_workers": self.max_workers},
            )
        if self.request_timeout <= 0:
            raise ConfigurationError(
                "REQUEST_TIMEOUT must be > 0",
                details={"request_timeout": self.request_timeout},
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "Settings":
        """
        Build Settings from environment variables.

        Keyword overrides (e.g. from CLI flags) win over the environment.

        Raises:
            ConfigurationError: on missing or invalid values.
        """
        env = os.environ if environ is None else environ

        values = {
            "authorization": env.get("AUTHORIZATION", ""),
            "server": env.get("SERVER", ""),
            "environment": env.get("ENVIRONMENT") or None,
            "dry_run": env.get("DRY_RUN") == "1",
            "force_update": env.get("FORCE_UPDATE") == "1",
            "allow_empty": env.get("ALLOW_EMPTY") == "1",
            "source": env.get("SOURCE") or "bigquery",
            "bucket": env.get("BUCKET") or DEFAULT_BUCKET,
            "collection": env.get("COLLECTION") or DEFAULT_COLLECTION,
            "archive_url": env.get("ARCHIVE_URL") or DEFAULT_ARCHIVE_URL,
            "processes": _split_list(env.get("PROCESSES")) or DEFAULT_PROCESSES,
            "channels": _split_list(env.get("CHANNELS")) or DEFAULT_CHANNELS,
            "bigquery_project": env.get("BIGQUERY_PROJECT") or DEFAULT_BIGQUERY_PROJECT,
            "query_file": env.get("QUERY_FILE") or None,
            "max_workers": _parse_int(env.get("MAX_WORKERS"), "MAX_WORKERS", 1),
            "request_timeout": _parse_float(env.get("REQUEST_TIMEOUT"), "REQUEST_TIMEOUT", 30.0),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def auth_info(self) -> AuthInfo:
        return AuthInfo(self.authorization)

    @property
    def self_approving(self) -> bool:
        return self.environment in SELF_APPROVING_ENVIRONMENTS

    @property
    def collection_endpoint(self) -> str:
        server = self.server.rstrip("/")
        return f"{server}/buckets/{self.bucket}/collections/{self.collection}"

    @property
    def records_endpoint(self) -> str:
        return f"{self.collection_endpoint}/records"


def _split_list(value: Optional[str]) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _parse_int(value: Optional[str], name: str, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer", details={name: value}, cause=exc) from exc


def _parse_float(value: Optional[str], name: str, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number", details={name: value}, cause=exc) from exc
