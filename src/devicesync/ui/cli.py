from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from devicesync.app import reconcile_each_tenant, reconcile_feed_run, summarize_feed_run
from devicesync.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from devicesync.domain.reconciliation import ReconcileResult
    from devicesync.domain.reporting import RunSummary

log = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid integer: {value}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {value}")
    return parsed


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile device status against carrier feeds")
    subparsers = parser.add_subparsers(dest="command", required=True)

    reconcile = subparsers.add_parser("reconcile", help="Reconcile a feed run")
    reconcile.add_argument(
        "--run-id",
        type=_positive_int,
        required=True,
        help="Identifier of the feed run to reconcile",
    )
    scope = reconcile.add_mutually_exclusive_group()
    scope.add_argument(
        "--tenant-id",
        type=_positive_int,
        help="Restrict reconciliation to one tenant",
    )
    scope.add_argument(
        "--each-tenant",
        action="store_true",
        help="Reconcile every tenant in the run as its own transaction",
    )

    summary = subparsers.add_parser("summary", help="Show the outcome of a feed run")
    summary.add_argument(
        "--run-id",
        type=_positive_int,
        required=True,
        help="Identifier of the feed run to summarise",
    )

    return parser.parse_args(list(argv))


def _log_result(result: ReconcileResult) -> None:
    if result.skipped:
        log.warning(
            "Feed run %s skipped (tenant=%s): %s",
            result.run_id,
            result.tenant_id,
            result.verdict.reason,
        )
        return
    log.info(
        "Feed run %s reconciled (tenant=%s): updated=%s, inserted=%s, flipped_unknown=%s",
        result.run_id,
        result.tenant_id,
        result.updated,
        result.inserted,
        result.flipped_unknown,
    )


def _log_summary(summary: RunSummary) -> None:
    log.info(
        "Feed run %s: valid=%s, processed_at=%s, unknown_flips=%s",
        summary.run_id,
        summary.is_valid,
        summary.processed_at,
        summary.unknown_flip_count,
    )
    for snapshot in summary.snapshots:
        log.info(
            "  tenant %s: active=%s, suspended=%s, inactive=%s, unknown=%s",
            snapshot.tenant_id,
            snapshot.active_count,
            snapshot.suspended_count,
            snapshot.inactive_count,
            snapshot.unknown_count,
        )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        configure_logging()
    except ConfigurationError as exc:
        sys.exit(f"devicesync: {exc}")
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "reconcile":
            if parsed_args.each_tenant:
                results = reconcile_each_tenant(parsed_args.run_id)
            else:
                results = [reconcile_feed_run(parsed_args.run_id, parsed_args.tenant_id)]
            for result in results:
                _log_result(result)
        elif parsed_args.command == "summary":
            _log_summary(summarize_feed_run(parsed_args.run_id))
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

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
