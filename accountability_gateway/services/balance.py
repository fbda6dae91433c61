"""Account balance snapshots and transfer eligibility"""

import logging
from decimal import Decimal
from typing import List, Optional

from accountability_gateway.domain.exceptions import ValidationFailedError
from accountability_gateway.domain.models import (
    AccountUsage,
    BalanceSnapshot,
    BalanceSummary,
    RefillStatus,
    TransferCalculation,
    UberEarningsDelta,
)
from accountability_gateway.domain.rules import (
    ZERO,
    calculate_available_transfers,
    check_refill,
)
from accountability_gateway.domain.summary import render_balance_summary
from accountability_gateway.infrastructure.store import properties as props
from accountability_gateway.infrastructure.store.base import Record, RecordStore
from accountability_gateway.infrastructure.store.schema import BALANCE
from accountability_gateway.utils.date_utils import Clock, cutoff_date
from accountability_gateway.utils.money import format_currency, round2, to_decimal

logger = logging.getLogger(__name__)


def parse_balance(record: Record) -> BalanceSnapshot:
    return BalanceSnapshot(
        id=record["id"],
        date=props.read_date(record, BALANCE.date),
        account_a=props.read_decimal(record, BALANCE.account_a),
        account_b=props.read_decimal(record, BALANCE.account_b),
        checking=props.read_decimal(record, BALANCE.checking),
    )


def _require_amount(value, field_name: str) -> Decimal:
    try:
        amount = to_decimal(value)
    except (ArithmeticError, ValueError) as e:
        raise ValidationFailedError(f"{field_name} must be a number, got {value!r}") from e
    if not amount.is_finite():
        raise ValidationFailedError(f"{field_name} must be a number, got {value!r}")
    return round2(amount)


class BalanceService:
    """Owns the Balances collection (append-only snapshots)"""

    def __init__(self, store: RecordStore, database_id: str, clock: Clock):
        self.store = store
        self.database_id = database_id
        self.clock = clock

    async def update(self, account_a, account_b, checking) -> BalanceSnapshot:
        """Append a snapshot dated today; earlier snapshots are never modified"""
        account_a = _require_amount(account_a, "account_a")
        account_b = _require_amount(account_b, "account_b")
        checking = _require_amount(checking, "checking")

        today = self.clock()
        properties = {
            BALANCE.date: props.date_value(today),
            BALANCE.account_a: props.number_value(account_a),
            BALANCE.account_b: props.number_value(account_b),
            BALANCE.checking: props.number_value(checking),
        }
        record = await self.store.create(self.database_id, properties, f"Balances {today.isoformat()}")
        logger.info(
            "Balances updated",
            extra={"account_a": str(account_a), "account_b": str(account_b), "checking": str(checking)},
        )
        return BalanceSnapshot(id=record["id"], date=today, account_a=account_a, account_b=account_b, checking=checking)

    async def get_latest(self) -> Optional[BalanceSnapshot]:
        records = await self.store.query(self.database_id, None, props.descending(BALANCE.date))
        return parse_balance(records[0]) if records else None

    async def get_history(self, window_days: int = 30) -> List[BalanceSnapshot]:
        """Snapshots within the window, newest first"""
        records = await self.store.query(
            self.database_id,
            props.date_on_or_after(BALANCE.date, cutoff_date(self.clock(), window_days)),
            props.descending(BALANCE.date),
        )
        return [parse_balance(r) for r in records]

    async def calculate_available_transfers(
        self,
        workout_earnings=ZERO,
        bonus_earnings=ZERO,
        uber_earnings=ZERO,
    ) -> TransferCalculation:
        latest = await self.get_latest()
        return calculate_available_transfers(workout_earnings, bonus_earnings, uber_earnings, latest)

    async def check_refill_needed(self) -> RefillStatus:
        return check_refill(await self.get_latest())

    async def generate_summary(self) -> BalanceSummary:
        latest = await self.get_latest()
        refill = check_refill(latest)
        return BalanceSummary(
            balances=latest,
            refill_needed=refill.refill_needed,
            refill_amount=refill.suggested_refill,
            summary=render_balance_summary(latest, refill),
        )

    async def calculate_uber_earnings(self, previous_account_b=None) -> UberEarningsDelta:
        """Positive Account B growth since ``previous_account_b`` counts as delivery earnings"""
        latest = await self.get_latest()
        current = latest.account_b if latest else ZERO
        if latest is None or previous_account_b is None:
            return UberEarningsDelta(earnings=ZERO, current_balance=current, previous_balance=None)

        previous = _require_amount(previous_account_b, "previous_account_b")
        earnings = max(ZERO, current - previous)
        if earnings > 0:
            logger.info("Uber earnings detected", extra={"earnings": format_currency(earnings)})
        return UberEarningsDelta(earnings=earnings, current_balance=current, previous_balance=previous)

    async def get_account_a_usage(self, window_days: int = 30) -> AccountUsage:
        history = await self.get_history(window_days)
        if len(history) < 2:
            balance = history[0].account_a if history else ZERO
            return AccountUsage(
                window_days=window_days,
                starting_balance=balance,
                current_balance=balance,
                total_used=ZERO,
                average_daily_use=ZERO,
                projected_monthly_use=ZERO,
            )

        starting = history[-1].account_a
        current = history[0].account_a
        total_used = starting - current
        average_daily_use = round2(total_used / window_days)
        return AccountUsage(
            window_days=window_days,
            starting_balance=starting,
            current_balance=current,
            total_used=total_used,
            average_daily_use=average_daily_use,
            projected_monthly_use=round2(total_used / window_days * 30),
        )
