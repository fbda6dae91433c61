"""Weekly bonus awards"""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from accountability_gateway.domain.exceptions import ValidationFailedError
from accountability_gateway.domain.models import Bonus, BonusStats, BonusStatus, PendingBonusTotal
from accountability_gateway.domain.rules import PERFECT_WEEK_BONUS, ZERO, require_positive
from accountability_gateway.infrastructure.store import properties as props
from accountability_gateway.infrastructure.store.base import Record, RecordStore
from accountability_gateway.infrastructure.store.schema import BONUS
from accountability_gateway.utils.date_utils import Clock, cutoff_date, start_of_week
from accountability_gateway.utils.money import format_currency, round2

logger = logging.getLogger(__name__)

PERFECT_WEEK = "Perfect Week"
JOB_APPLICATIONS = "Job Applications"
ALGOEXPERT = "AlgoExpert"
READING = "Reading"
DATING = "Dating"
GOOD_BOY = "Good Boy"

# Fixed-amount presets; Good Boy takes a caller-specified amount
BONUS_PRESETS: Dict[str, Decimal] = {
    PERFECT_WEEK: PERFECT_WEEK_BONUS,
    JOB_APPLICATIONS: Decimal("50"),
    ALGOEXPERT: Decimal("25"),
    READING: Decimal("25"),
    DATING: Decimal("30"),
}


def parse_bonus(record: Record) -> Bonus:
    return Bonus(
        id=record["id"],
        name=props.read_title(record),
        bonus_type=props.read_select(record, BONUS.bonus_type) or "Unknown",
        amount=props.read_decimal(record, BONUS.amount),
        week_of=props.read_date(record, BONUS.week_of),
        status=BonusStatus(props.read_select(record, BONUS.status) or BonusStatus.PENDING.value),
    )


class BonusService:
    """Owns the Bonuses collection"""

    def __init__(self, store: RecordStore, database_id: str, clock: Clock):
        self.store = store
        self.database_id = database_id
        self.clock = clock

    async def award(
        self,
        bonus_type: str,
        amount,
        week_of: Optional[date] = None,
        description: Optional[str] = None,
    ) -> Bonus:
        """
        Award a pending bonus for a week (default: current week).

        Raises:
            ValidationFailedError: Empty type or non-positive amount
        """
        if not bonus_type:
            raise ValidationFailedError("Bonus type is required")
        amount = round2(require_positive(amount, "amount"))
        week = week_of or start_of_week(self.clock())

        title = f"{bonus_type} - {format_currency(amount)} (Week of {week.isoformat()})"
        if description:
            title = f"{title}: {description}"
        properties = {
            BONUS.week_of: props.date_value(week),
            BONUS.bonus_type: props.select_value(bonus_type),
            BONUS.amount: props.number_value(amount),
            BONUS.status: props.select_value(BonusStatus.PENDING.value),
        }

        record = await self.store.create(self.database_id, properties, title)
        logger.info(
            "Bonus earned",
            extra={"bonus_id": record["id"], "bonus_type": bonus_type, "amount": str(amount), "week_of": week.isoformat()},
        )
        return Bonus(
            id=record["id"],
            name=title,
            bonus_type=bonus_type,
            amount=amount,
            week_of=week,
            status=BonusStatus.PENDING,
        )

    async def award_perfect_week(self, week_of: Optional[date] = None) -> Bonus:
        return await self.award(PERFECT_WEEK, BONUS_PRESETS[PERFECT_WEEK], week_of, "3 yoga + 3 lifting sessions")

    async def award_job_applications(self, week_of: Optional[date] = None, application_count: int = 25) -> Bonus:
        return await self.award(
            JOB_APPLICATIONS,
            BONUS_PRESETS[JOB_APPLICATIONS],
            week_of,
            f"{application_count}+ applications submitted",
        )

    async def award_algoexpert(self, week_of: Optional[date] = None, problem_count: int = 7) -> Bonus:
        return await self.award(ALGOEXPERT, BONUS_PRESETS[ALGOEXPERT], week_of, f"{problem_count} problems completed")

    async def award_reading(self, week_of: Optional[date] = None, book_title: Optional[str] = None) -> Bonus:
        description = f"Finished: {book_title}" if book_title else "Book completed"
        return await self.award(READING, BONUS_PRESETS[READING], week_of, description)

    async def award_dating(self, week_of: Optional[date] = None, details: Optional[str] = None) -> Bonus:
        return await self.award(DATING, BONUS_PRESETS[DATING], week_of, details or "Actual date completed")

    async def award_good_boy(self, amount, reason: str = "Exceptional effort") -> Bonus:
        return await self.award(GOOD_BOY, amount, None, reason)

    async def mark_paid(self, bonus_id: str) -> Bonus:
        """
        Mark a pending bonus paid. Paying a paid bonus is a no-op.

        Raises:
            RecordNotFoundError: Unknown id
        """
        bonus = parse_bonus(await self.store.get(bonus_id))
        if bonus.status == BonusStatus.PAID:
            return bonus

        await self.store.update(bonus_id, {BONUS.status: props.select_value(BonusStatus.PAID.value)})
        logger.info("Bonus marked as paid", extra={"bonus_id": bonus_id})
        bonus.status = BonusStatus.PAID
        return bonus

    async def get_pending(self, week_of: Optional[date] = None) -> List[Bonus]:
        """Pending bonuses, newest week first, optionally for one week"""
        pending = props.select_equals(BONUS.status, BonusStatus.PENDING.value)
        filter = props.all_of(pending, props.date_equals(BONUS.week_of, week_of)) if week_of else pending

        records = await self.store.query(self.database_id, filter, props.descending(BONUS.week_of))
        return [parse_bonus(r) for r in records]

    async def get_for_week(self, week_of: Optional[date] = None) -> List[Bonus]:
        week = week_of or start_of_week(self.clock())
        records = await self.store.query(self.database_id, props.date_equals(BONUS.week_of, week))
        return [parse_bonus(r) for r in records]

    async def calculate_total_pending(self) -> PendingBonusTotal:
        bonuses = await self.get_pending()
        return PendingBonusTotal(
            total_amount=sum((b.amount for b in bonuses), ZERO),
            bonus_count=len(bonuses),
            bonuses=bonuses,
        )

    async def get_stats(self, window_days: int = 30) -> BonusStats:
        records = await self.store.query(
            self.database_id,
            props.date_on_or_after(BONUS.week_of, cutoff_date(self.clock(), window_days)),
        )
        bonuses = [parse_bonus(r) for r in records]

        by_type: Dict[str, Decimal] = defaultdict(lambda: ZERO)
        for bonus in bonuses:
            by_type[bonus.bonus_type] += bonus.amount

        pending = [b for b in bonuses if b.status == BonusStatus.PENDING]
        paid = [b for b in bonuses if b.status == BonusStatus.PAID]
        return BonusStats(
            window_days=window_days,
            total_bonuses=len(bonuses),
            pending_bonuses=len(pending),
            paid_bonuses=len(paid),
            total_earned=sum((b.amount for b in bonuses), ZERO),
            total_pending=sum((b.amount for b in pending), ZERO),
            total_paid=sum((b.amount for b in paid), ZERO),
            by_type=dict(by_type),
        )
