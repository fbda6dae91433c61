"""Debt assignment, daily interest, and payoff"""

import logging
from decimal import Decimal
from typing import List, Optional

from accountability_gateway.domain.models import (
    Debt,
    DebtStats,
    DebtStatus,
    DebtTotal,
    InterestCharge,
    PaymentResult,
)
from accountability_gateway.domain.rules import (
    DAILY_INTEREST_RATE,
    ZERO,
    accrue_interest,
    apply_payment,
    require_positive,
)
from accountability_gateway.infrastructure.database.repositories import AccrualRepository
from accountability_gateway.infrastructure.observability.metrics import (
    debt_created_counter,
    interest_charged_counter,
)
from accountability_gateway.infrastructure.store import properties as props
from accountability_gateway.infrastructure.store.base import Record, RecordStore
from accountability_gateway.infrastructure.store.schema import DEBT
from accountability_gateway.utils.date_utils import Clock, cutoff_date
from accountability_gateway.utils.money import format_currency, round2

logger = logging.getLogger(__name__)


def parse_debt(record: Record) -> Debt:
    return Debt(
        id=record["id"],
        name=props.read_title(record),
        original_amount=props.read_decimal(record, DEBT.original_amount),
        current_amount=props.read_decimal(record, DEBT.current_amount),
        daily_interest_rate=props.read_decimal(record, DEBT.interest_rate),
        date_assigned=props.read_date(record, DEBT.date_assigned),
        status=DebtStatus(props.read_select(record, DEBT.status) or DebtStatus.ACTIVE.value),
    )


class DebtService:
    """
    Owns the Debt collection.

    When an AccrualRepository is attached, apply_daily_interest charges each
    debt at most once per calendar day. Without one, every call compounds.
    """

    def __init__(
        self,
        store: RecordStore,
        database_id: str,
        clock: Clock,
        accruals: Optional[AccrualRepository] = None,
    ):
        self.store = store
        self.database_id = database_id
        self.clock = clock
        self.accruals = accruals

    async def create(self, amount, reason: str = "Violation", source: str = "manual") -> Debt:
        """
        Assign a new active debt at the fixed daily rate.

        Raises:
            ValidationFailedError: Non-positive amount
        """
        amount = round2(require_positive(amount, "amount"))
        today = self.clock()
        title = f"{format_currency(amount)} - {reason}"
        properties = {
            DEBT.date_assigned: props.date_value(today),
            DEBT.original_amount: props.number_value(amount),
            DEBT.current_amount: props.number_value(amount),
            DEBT.interest_rate: props.number_value(DAILY_INTEREST_RATE),
            DEBT.status: props.select_value(DebtStatus.ACTIVE.value),
        }

        record = await self.store.create(self.database_id, properties, title)
        debt_created_counter.labels(source=source).inc()
        logger.info(
            "Debt assigned",
            extra={"debt_id": record["id"], "amount": str(amount), "reason": reason},
        )
        return Debt(
            id=record["id"],
            name=title,
            original_amount=amount,
            current_amount=amount,
            daily_interest_rate=DAILY_INTEREST_RATE,
            date_assigned=today,
            status=DebtStatus.ACTIVE,
        )

    async def get_active(self) -> List[Debt]:
        """Active debts, oldest first"""
        records = await self.store.query(
            self.database_id,
            props.select_equals(DEBT.status, DebtStatus.ACTIVE.value),
            props.ascending(DEBT.date_assigned),
        )
        return [parse_debt(r) for r in records]

    async def apply_daily_interest(self) -> List[InterestCharge]:
        """
        Compound one day of interest on every active debt.

        Debts already charged today (per the accrual ledger) are skipped.
        """
        today = self.clock()
        already_accrued = self.accruals.accrued_debt_ids(today) if self.accruals else set()
        charges: List[InterestCharge] = []

        for debt in await self.get_active():
            if debt.id in already_accrued:
                logger.info("Interest already applied today", extra={"debt_id": debt.id})
                continue

            new_amount = accrue_interest(debt.current_amount, debt.daily_interest_rate)
            await self.store.update(debt.id, {DEBT.current_amount: props.number_value(new_amount)})
            if self.accruals:
                self.accruals.record_accrual(debt.id, today, debt.current_amount, new_amount)

            charge = InterestCharge(
                debt_id=debt.id,
                old_amount=debt.current_amount,
                new_amount=new_amount,
                interest_charged=new_amount - debt.current_amount,
            )
            interest_charged_counter.inc(float(charge.interest_charged))
            logger.info(
                "Interest applied",
                extra={"debt_id": debt.id, "old_amount": str(debt.current_amount), "new_amount": str(new_amount)},
            )
            charges.append(charge)

        return charges

    async def pay_off(self, debt_id: str, payment_amount) -> PaymentResult:
        """
        Apply a payment to one debt. A zero remainder marks the debt paid.

        Raises:
            ValidationFailedError: Non-positive payment
            RecordNotFoundError: Unknown id
        """
        payment = require_positive(payment_amount, "payment_amount")
        debt = parse_debt(await self.store.get(debt_id))
        remaining = apply_payment(debt.current_amount, payment)

        properties = {DEBT.current_amount: props.number_value(remaining)}
        if remaining == ZERO:
            properties[DEBT.status] = props.select_value(DebtStatus.PAID.value)
        await self.store.update(debt_id, properties)

        status = DebtStatus.PAID if remaining == ZERO else DebtStatus.ACTIVE
        logger.info(
            "Payment applied to debt",
            extra={"debt_id": debt_id, "payment": str(payment), "remaining": str(remaining)},
        )
        return PaymentResult(
            debt_id=debt_id,
            payment_amount=payment,
            remaining_amount=remaining,
            status=status,
            fully_paid=status == DebtStatus.PAID,
        )

    async def get_total(self) -> DebtTotal:
        debts = await self.get_active()
        return DebtTotal(
            total_debt=sum((d.current_amount for d in debts), ZERO),
            debt_count=len(debts),
            debts=debts,
        )

    async def pay_off_oldest(self, payment_amount) -> Optional[PaymentResult]:
        """
        Apply a payment to the single oldest active debt.

        Any excess over that debt is reported as ``remaining_payment`` and is
        not applied to other debts. Returns None when no debt is active.
        """
        payment = require_positive(payment_amount, "payment_amount")
        debts = await self.get_active()
        if not debts:
            return None

        oldest = debts[0]
        result = await self.pay_off(oldest.id, payment)
        result.remaining_payment = max(ZERO, payment - oldest.current_amount)
        return result

    async def get_stats(self, window_days: int = 30) -> DebtStats:
        records = await self.store.query(
            self.database_id,
            props.date_on_or_after(DEBT.date_assigned, cutoff_date(self.clock(), window_days)),
        )
        debts = [parse_debt(r) for r in records]
        total_original = sum((d.original_amount for d in debts), ZERO)
        total_current = sum((d.current_amount for d in debts), ZERO)

        return DebtStats(
            window_days=window_days,
            total_debts=len(debts),
            active_debts=sum(1 for d in debts if d.status == DebtStatus.ACTIVE),
            paid_debts=sum(1 for d in debts if d.status == DebtStatus.PAID),
            total_original_amount=total_original,
            total_current_amount=total_current,
            total_interest_accrued=total_current - total_original,
        )
