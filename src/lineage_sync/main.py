"""Command line interface for lineage-sync."""

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from lineage_sync.adapters.events import EventFormatError
from lineage_sync.app import init_catalog_database, reconcile_event_files
from lineage_sync.config import ConfigurationError, configure_logging, get_reconcile_policy

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile lineage events into a metadata catalog")
    subparsers = parser.add_subparsers(dest="command", required=True)

    reconcile = subparsers.add_parser("reconcile", help="Replay lineage event files")
    reconcile.add_argument(
        "paths",
        nargs="+",
        metavar="PATH",
        help="JSON event files, reconciled in the order given",
    )
    reconcile.add_argument(
        "--database-uri",
        type=str,
        help="Catalog database URI (defaults to DATABASE_URI or the data directory)",
    )
    reconcile.add_argument(
        "--dry-run",
        action="store_true",
        help="Reconcile against an empty in-memory catalog and discard the result",
    )

    init_db = subparsers.add_parser("init-db", help="Create or upgrade the catalog database")
    init_db.add_argument(
        "--database-uri",
        type=str,
        help="Catalog database URI (defaults to DATABASE_URI or the data directory)",
    )

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        policy = get_reconcile_policy()
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)

    try:
        if parsed_args.command == "reconcile":
            results = reconcile_event_files(
                parsed_args.paths,
                policy=policy,
                database_uri=parsed_args.database_uri,
                dry_run=parsed_args.dry_run,
            )
            for result in results:
                log.info(
                    "Process %s: %s, inputs=%s, outputs=%s",
                    result.process_guid,
                    result.lineage.process_action,
                    len(result.input_asset_guids),
                    len(result.output_asset_guids),
                )
        elif parsed_args.command == "init-db":
            url = init_catalog_database(database_uri=parsed_args.database_uri)
            log.info("Catalog database initialised at %s", url)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except EventFormatError:
        log.exception("Invalid event file")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
