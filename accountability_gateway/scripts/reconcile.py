"""Command-line entry point for the scheduled nightly run"""

import argparse
import asyncio
import logging
from typing import List, Optional

from accountability_gateway.bootstrap import AccountabilityServices, build_notifier, build_services, build_store
from accountability_gateway.config import settings
from accountability_gateway.domain.exceptions import DomainException
from accountability_gateway.domain.rules import ZERO
from accountability_gateway.infrastructure.clients.discord import DiscordNotifier
from accountability_gateway.infrastructure.database.session import SessionLocal, init_db
from accountability_gateway.infrastructure.observability.logging import setup_logging
from accountability_gateway.utils.date_utils import make_clock
from accountability_gateway.utils.money import format_currency, to_decimal

logger = logging.getLogger(__name__)

RULE = "=" * 50


def non_negative_amount(value: str):
    try:
        amount = to_decimal(value)
    except ArithmeticError:
        raise argparse.ArgumentTypeError(f"invalid amount: {value!r}")
    if not amount.is_finite() or amount < 0:
        raise argparse.ArgumentTypeError(f"amount must be zero or more: {value!r}")
    return amount


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="accountability-reconcile",
        description="Run the nightly accountability reconciliation",
    )
    parser.add_argument(
        "--uber-earnings",
        type=non_negative_amount,
        default=ZERO,
        metavar="AMOUNT",
        help="Uber earnings to include in transfer approvals (default: 0)",
    )
    parser.add_argument(
        "--interest-only",
        action="store_true",
        help="Only apply daily interest to active debts",
    )
    parser.add_argument("--no-notify", action="store_true", help="Do not post to the webhook")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    return parser


async def notify_outcome(services: AccountabilityServices, notifier: DiscordNotifier, summary: str) -> None:
    """Post the summary, then escalate when debt is still outstanding"""
    await notifier.send_reconciliation_summary(summary)

    total = await services.debt.get_total()
    if total.total_debt > 0:
        # Debts are oldest first; undated rows sort last
        oldest = total.debts[0].date_assigned
        days = (services.debt.clock() - oldest).days if oldest else 0
        await notifier.send_debt_escalation(total.total_debt, days)


async def run(
    args: argparse.Namespace,
    services: AccountabilityServices,
    notifier: Optional[DiscordNotifier] = None,
) -> int:
    """
    Execute one invocation.

    Returns:
        Process exit code: 0 on success, 1 when the run failed
    """
    try:
        if args.interest_only:
            charges = await services.debt.apply_daily_interest()
            total = sum((c.interest_charged for c in charges), ZERO)
            print(f"Interest applied to {len(charges)} debts: {format_currency(total)}")
            return 0

        result = await services.reconciliation.run_nightly(args.uber_earnings, trigger="scheduled")
    except Exception as e:
        logger.error(f"Reconciliation failed: {e}", extra={"error_type": type(e).__name__})
        return 1

    print(RULE)
    print(result.summary)
    print(RULE)

    if notifier is not None and not args.no_notify:
        try:
            await notify_outcome(services, notifier, result.summary)
        except Exception as e:
            logger.warning(f"Notification after reconciliation failed: {e}", extra={"error_type": type(e).__name__})
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else settings.log_level, settings.service_name)

    try:
        collections = settings.collection_ids()
        store = build_store(settings)
    except DomainException as e:
        logger.error(f"Configuration error: {e}")
        return 1

    init_db()
    db = SessionLocal()
    try:
        services = build_services(
            collections,
            store,
            make_clock(settings.timezone),
            db,
            yoga_kind=settings.yoga_workout_type,
            lifting_kind=settings.lifting_workout_type,
        )
        return asyncio.run(run(args, services, build_notifier(settings)))
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
