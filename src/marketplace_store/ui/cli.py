# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from marketplace_store.adapters.snapshot import SnapshotError, update_info_to_document
from marketplace_store.app import sync_snapshot, updated_since, vendor_status
from marketplace_store.config import ConfigurationError, configure_logging
from marketplace_store.domain.model import Vendor
from marketplace_store.domain.time_source import ensure_utc

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Maintain vendor release records")
    parser.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy async database URI (defaults to DATABASE_URI or the data dir)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Reconcile a release snapshot file")
    sync.add_argument("snapshot", type=Path, help="JSON snapshot written by the fetch job")
    sync.add_argument(
        "--vendor",
        dest="vendors",
        action="append",
        type=Vendor,
        choices=list(Vendor),
        help="Vendor to reconcile (repeatable; defaults to every vendor in the snapshot)",
    )

    status = subparsers.add_parser("status", help="Print the update log of a vendor")
    status.add_argument("vendor", type=Vendor, choices=list(Vendor))

    since = subparsers.add_parser(
        "updated-since",
        help="Print the last change time of a vendor if it is newer than a timestamp",
    )
    since.add_argument("vendor", type=Vendor, choices=list(Vendor))
    since.add_argument("since", type=str, help="ISO-8601 timestamp (UTC if no offset)")

    return parser.parse_args(list(argv))


def _parse_since(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp: {value}") from exc
    return ensure_utc(parsed)


def _run_sync(args: argparse.Namespace) -> None:
    results = asyncio.run(
        sync_snapshot(args.snapshot, vendors=args.vendors, database_uri=args.database_uri)
    )
    for vendor, update in results.items():
        print(
            f"{vendor}: added={len(update.added)} updated={len(update.updated)} "
            f"removed={len(update.removed)}"
        )


def _run_status(args: argparse.Namespace) -> None:
    entries = asyncio.run(vendor_status(args.vendor, database_uri=args.database_uri))
    for entry in entries:
        print(json.dumps(update_info_to_document(entry), sort_keys=True))


def _run_updated_since(args: argparse.Namespace, since: datetime) -> None:
    info = asyncio.run(updated_since(args.vendor, since, database_uri=args.database_uri))
    if info is None:
        print(f"{args.vendor}: no update since {since.isoformat()}")
    else:
        print(f"{args.vendor}: updated at {info.time.isoformat()}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    since: datetime | None = None
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "updated-since":
            since = _parse_since(parsed_args.since)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "sync":
            _run_sync(parsed_args)
        elif parsed_args.command == "status":
            _run_status(parsed_args)
        elif parsed_args.command == "updated-since" and since is not None:
            _run_updated_since(parsed_args, since)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (ConfigurationError, SnapshotError):
        log.exception("Invalid input")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
