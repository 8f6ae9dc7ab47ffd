"""Diagnostic and administrative command line.

Usage:
    transferquota quotas
    transferquota set-quota alice 10
    transferquota set-thresholds 80 95
    transferquota process-downloads --lookback 120 --debug
    transferquota reprocess --account alice
    transferquota reset --all
"""

import argparse
import asyncio
import sys
from datetime import timedelta
from typing import Optional, Sequence

from transferquota import crud
from transferquota.core.config import settings
from transferquota.core.container import Container
from transferquota.core.datetime_utils import utc_now_naive
from transferquota.core.exceptions import TransferQuotaException
from transferquota.core.logging import logger
from transferquota.db.errors import STORAGE_ERRORS
from transferquota.domains.aggregation.types import AggregationSummary
from transferquota.domains.notifications.templates import format_bytes
from transferquota.schemas.transfer_quota import QuotaOverview

RULE = "=" * 96


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transferquota", description="Monthly data transfer quota administration"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("quotas", help="Show every quota record and the global thresholds")

    set_quota = commands.add_parser("set-quota", help="Set one account's monthly limit")
    set_quota.add_argument("account", help="Account ID")
    set_quota.add_argument("gib", type=float, help="Limit in GiB (0 = untracked)")

    set_thresholds = commands.add_parser(
        "set-thresholds", help="Set the global percentages and recheck every account"
    )
    set_thresholds.add_argument("warning", type=int, help="Warning percentage")
    set_thresholds.add_argument("critical", type=int, help="Critical percentage")

    process = commands.add_parser(
        "process-downloads", help="Run one download count aggregation pass now"
    )
    process.add_argument(
        "--lookback",
        type=int,
        default=60,
        metavar="MIN",
        help=(
            "With --debug, list watermarks advanced in the last MIN minutes "
            "(default: 60). The aggregation pass always covers every account."
        ),
    )
    process.add_argument(
        "--debug", action="store_true", help="Dump counters, watermarks and quotas"
    )

    reprocess = commands.add_parser(
        "reprocess", help="Aggregate downloads for one account or for all accounts"
    )
    reprocess.add_argument("--account", help="Only this account")

    reset = commands.add_parser("reset", help="Reset usage and re-arm notifications")
    target = reset.add_mutually_exclusive_group(required=True)
    target.add_argument("--account", help="Reset only this account")
    target.add_argument("--all", action="store_true", help="Reset every account")

    return parser


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def print_overview(overview: QuotaOverview) -> None:
    print(RULE)
    print(
        f"Thresholds: warning {overview.thresholds.warning}%, "
        f"critical {overview.thresholds.critical}%"
    )
    print(RULE)
    print(f"{'ACCOUNT':<32} {'LIMIT':>12} {'USED':>12} {'%':>7}  LATCHES  LAST RESET")
    print("-" * 96)
    for quota in overview.quotas:
        limit = format_bytes(quota.monthly_limit_bytes) if quota.is_tracked else "untracked"
        latches = ("W" if quota.warning_latch else "-") + ("C" if quota.critical_latch else "-")
        last_reset = quota.last_reset_at.isoformat(timespec="seconds") if quota.last_reset_at else ""
        print(
            f"{quota.account_id:<32} {limit:>12} {format_bytes(quota.current_usage_bytes):>12} "
            f"{quota.percent_used:>6.1f}%  {latches:<8} {last_reset}"
        )
    print()


def print_summary(summary: AggregationSummary) -> None:
    print(
        f"✓ Aggregation: {summary.accounts_seen} accounts seen, "
        f"{summary.accounts_billed} billed ({format_bytes(summary.bytes_billed)}), "
        f"{summary.rebased} rebased, {summary.errors} errors"
    )


async def print_debug(container: Container, lookback_minutes: int) -> None:
    from transferquota.db.session import get_db_context

    since = utc_now_naive() - timedelta(minutes=lookback_minutes)
    async with get_db_context() as db:
        counts = await container.counter_source.get_counts(db)
        watermarks = await crud.aggregation_watermark.get_updated_since(db, since=since)

    print(RULE)
    print(f"External download counters ({len(counts)})")
    print(RULE)
    for account_id, count in sorted(counts.items()):
        print(f"{account_id:<32} {count:>10}")
    print()

    print(RULE)
    print(f"Watermarks advanced in the last {lookback_minutes} minutes ({len(watermarks)})")
    print(RULE)
    for watermark in watermarks:
        print(
            f"{watermark.account_id:<32} {watermark.last_processed_count:>10}  "
            f"{watermark.updated_at.isoformat(timespec='seconds')}"
        )
    print()

    overview = await container.admin.list_quotas()
    if overview is not None:
        print_overview(overview)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def run_command(args: argparse.Namespace, container: Container) -> int:
    """Execute a parsed command; returns the process exit code."""
    if args.command == "quotas":
        overview = await container.admin.list_quotas()
        if overview is None:
            print("ERROR: could not read quotas, see the log")
            return 1
        print_overview(overview)
        return 0

    if args.command == "set-quota":
        ok = await container.admin.set_quota_gib(args.account, args.gib)
        print(f"✓ Limit of {args.account} set to {args.gib:g} GiB" if ok else "ERROR: limit not set")
        return 0 if ok else 1

    if args.command == "set-thresholds":
        ok = await container.admin.set_thresholds(args.warning, args.critical)
        print(
            f"✓ Thresholds set to {args.warning}% / {args.critical}%"
            if ok
            else "ERROR: thresholds not applied"
        )
        return 0 if ok else 1

    if args.command == "process-downloads":
        summary = await container.aggregator.run()
        print_summary(summary)
        if args.debug:
            await print_debug(container, args.lookback)
        return 0 if summary.errors == 0 else 1

    if args.command == "reprocess":
        summary = await container.aggregator.run(account_id=args.account)
        print_summary(summary)
        return 0 if summary.errors == 0 else 1

    if args.command == "reset":
        if args.all:
            ok = await container.admin.reset_all()
            target = "all accounts"
        else:
            ok = await container.admin.reset_usage(args.account)
            target = args.account
        print(f"✓ Usage reset for {target}" if ok else f"ERROR: reset failed for {target}")
        return 0 if ok else 1

    raise ValueError(f"Unknown command {args.command!r}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Console script entry point."""
    args = build_parser().parse_args(argv)

    from transferquota.core import container as container_mod

    if container_mod.container is None:
        container_mod.initialize_container(settings)

    try:
        return asyncio.run(run_command(args, container_mod.container))
    except TransferQuotaException as e:
        print(f"ERROR: {e}")
        return 2
    except STORAGE_ERRORS:
        logger.error("Command failed on storage", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
