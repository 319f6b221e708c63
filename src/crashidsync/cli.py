"""Command line entry point: run one reconciliation and map the outcome to an exit code."""

from __future__ import annotations

import argparse
import logging
import os
from typing import Mapping, Optional, Sequence

from crashidsync.config import VALID_SOURCES, Settings
from crashidsync.errors import CrashIdSyncError
from crashidsync.logging_config import VALID_FORMATS, configure_logging
from crashidsync.manager import CrashIdSyncManager

logger = logging.getLogger(__name__)

SUCCESS_RET_VALUE = 0
FAILURE_RET_VALUE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crashidsync",
        description=(
            "Update the crash-reports-ondemand Remote Settings records to match "
            "the current top crashers."
        ),
        epilog="AUTHORIZATION and SERVER must be set in the environment.",
    )
    parser.add_argument("--source", choices=VALID_SOURCES, default=None,
                        help="Target-state source (env SOURCE, default: bigquery)")
    parser.add_argument("--dry-run", action="store_true", default=None,
                        help="Only log the changes that would be made (env DRY_RUN=1)")
    parser.add_argument("--force-update", action="store_true", default=None,
                        help="Update regardless of the last modification time (env FORCE_UPDATE=1)")
    parser.add_argument("--allow-empty", action="store_true", default=None,
                        help="Allow an empty target state to delete every record (env ALLOW_EMPTY=1)")
    parser.add_argument("--log-level", default=None, help="Log level (env LOG_LEVEL, default: INFO)")
    parser.add_argument("--log-format", choices=VALID_FORMATS, default=None,
                        help="Log format (env LOG_FORMAT, default: text)")
    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    env = os.environ if environ is None else environ
    args = build_parser().parse_args(argv)

    configure_logging(
        level=args.log_level or env.get("LOG_LEVEL") or "INFO",
        format_type=args.log_format or env.get("LOG_FORMAT") or "text",
    )

    try:
        settings = Settings.from_env(
            env,
            source=args.source,
            dry_run=args.dry_run,
            force_update=args.force_update,
            allow_empty=args.allow_empty,
        )
        if settings.dry_run:
            logger.info("Dry run: no changes will be made to %s", settings.collection_endpoint)

        result = CrashIdSyncManager(settings).run()
    except CrashIdSyncError as exc:
        logger.error("%s %s", exc, exc.details or "", exc_info=exc.cause is not None)
        return FAILURE_RET_VALUE
    except Exception:
        logger.exception("Unexpected error")
        return FAILURE_RET_VALUE

    logger.info("Run %s: %s", result.status, result.summary)
    return SUCCESS_RET_VALUE
