"""Nightly reconciliation engine - the seven-step pipeline tying the services together"""

import logging
import time
from datetime import timedelta
from typing import List, Optional, Tuple

from accountability_gateway.domain.models import (
    Bonus,
    BonusCheckResult,
    CardioAssignment,
    CardioStatus,
    DailyEarnings,
    Debt,
    ReconciliationResult,
    TransferApproval,
    UberEarningsOutcome,
    OverdueSweepResult,
)
from accountability_gateway.domain.exceptions import RecordNotFoundError
from accountability_gateway.domain.rules import (
    MISSED_CARDIO_DEBT,
    ZERO,
    calculate_daily_earnings,
    require_positive,
)
from accountability_gateway.domain.summary import render_reconciliation_summary
from accountability_gateway.infrastructure.database.repositories import (
    INTENT_PENDING,
    IntentRepository,
    RunRepository,
)
from accountability_gateway.infrastructure.observability.logging import log_reconciliation
from accountability_gateway.infrastructure.observability.metrics import record_reconciliation
from accountability_gateway.services.balance import BalanceService
from accountability_gateway.services.bonus import PERFECT_WEEK, BonusService
from accountability_gateway.services.cardio import CardioService
from accountability_gateway.services.debt import DebtService
from accountability_gateway.services.workout import WorkoutService
from accountability_gateway.utils.date_utils import Clock, is_end_of_week, start_of_week
from accountability_gateway.utils.money import format_currency, to_decimal

logger = logging.getLogger(__name__)


def missed_cardio_reason(kind: str) -> str:
    return f"Missed cardio: {kind}"


class ReconciliationService:
    """
    Runs the nightly pipeline once per invocation.

    Steps execute sequentially and any failure aborts the run; writes already
    made stay in the store. The optional ledger repositories record the run
    and make the overdue sweep resumable.
    """

    def __init__(
        self,
        cardio: CardioService,
        debt: DebtService,
        workout: WorkoutService,
        bonus: BonusService,
        balance: BalanceService,
        clock: Clock,
        intents: Optional[IntentRepository] = None,
        runs: Optional[RunRepository] = None,
    ):
        self.cardio = cardio
        self.debt = debt
        self.workout = workout
        self.bonus = bonus
        self.balance = balance
        self.clock = clock
        self.intents = intents
        self.runs = runs

    async def run_nightly(self, uber_earnings=ZERO, trigger: str = "scheduled") -> ReconciliationResult:
        """
        Main entry point: execute the full pipeline and render the summary.

        Flow:
        1. Convert overdue cardio into $50 debts, then mark it missed
        2. Apply daily interest to active debts (including ones from step 1)
        3. Compute today's workout earnings against the weekly yoga count
        4. On Sunday, evaluate the finished week and award Perfect Week
        5. Compute transfer approvals and flag Uber earnings blocked by debt
        6. Build the balance summary
        7. Render the text report
        """
        today = self.clock()
        uber_earnings = to_decimal(uber_earnings)
        start_time = time.time()
        run = self.runs.start_run(today, trigger) if self.runs else None
        logger.info("Starting nightly reconciliation", extra={"run_date": today.isoformat(), "trigger": trigger})

        try:
            logger.info("Checking overdue cardio assignments", extra={"step": 1})
            overdue = await self.process_overdue_cardio()

            logger.info("Applying daily interest to debts", extra={"step": 2})
            interest = await self.debt.apply_daily_interest()

            logger.info("Calculating workout earnings", extra={"step": 3})
            workout_earnings = await self.calculate_daily_workout_earnings()

            logger.info("Checking weekly bonuses", extra={"step": 4})
            bonus_check = await self.check_weekly_bonuses()

            logger.info("Calculating available transfers", extra={"step": 5})
            transfers = await self.calculate_transfer_approvals(
                workout_earnings.total_earnings,
                bonus_check.total_bonuses,
                uber_earnings,
            )

            logger.info("Generating balance summary", extra={"step": 6})
            balance_summary = await self.balance.generate_summary()

            result = ReconciliationResult(
                run_date=today,
                overdue=overdue,
                interest=interest,
                workout_earnings=workout_earnings,
                bonus_check=bonus_check,
                transfers=transfers,
                balance_summary=balance_summary,
            )
            result.summary = render_reconciliation_summary(result)

        except Exception as e:
            duration = time.time() - start_time
            record_reconciliation(False, duration)
            log_reconciliation(today, trigger, False, duration * 1000, {"error": str(e)})
            if run is not None:
                self.runs.fail_run(run.id, str(e))
            raise

        duration = time.time() - start_time
        record_reconciliation(True, duration)
        log_reconciliation(
            today,
            trigger,
            True,
            duration * 1000,
            {
                "overdue_count": overdue.overdue_count,
                "interest_charges": len(interest),
                "bonuses_added": len(bonus_check.bonuses_added),
            },
        )
        if run is not None:
            self.runs.finish_run(run.id, result.summary)
        return result

    async def process_overdue_cardio(self) -> OverdueSweepResult:
        """
        Step 1: each overdue assignment becomes a debt, then is marked missed.

        The debt is created first; if that fails the assignment stays pending.
        With an intent log attached, unfinished pairs from an earlier run are
        completed before new overdue items are fetched.
        """
        debts_created: List[Debt] = []
        marked_missed: List[CardioAssignment] = []
        replayed = 0

        if self.intents is not None:
            replayed_debts, replayed_missed, replayed = await self._replay_unfinished_intents()
            debts_created.extend(replayed_debts)
            marked_missed.extend(replayed_missed)

        overdue = await self.cardio.get_overdue()
        for cardio in overdue:
            intent = self.intents.open_intent(cardio.id, cardio.kind, MISSED_CARDIO_DEBT) if self.intents else None
            try:
                debt = await self.debt.create(
                    MISSED_CARDIO_DEBT,
                    missed_cardio_reason(cardio.kind),
                    source="missed_cardio",
                )
            except Exception:
                if intent is not None:
                    self.intents.discard(intent)
                raise
            debts_created.append(debt)
            if intent is not None:
                self.intents.mark_debt_created(intent, debt.id)

            marked_missed.append(await self.cardio.mark_missed(cardio.id))
            if intent is not None:
                self.intents.complete(intent)

        return OverdueSweepResult(
            overdue_count=len(overdue),
            debts_created=debts_created,
            cardio_marked_missed=marked_missed,
            replayed_intents=replayed,
        )

    async def _replay_unfinished_intents(self) -> Tuple[List[Debt], List[CardioAssignment], int]:
        debts: List[Debt] = []
        missed: List[CardioAssignment] = []
        unfinished = self.intents.get_unfinished()

        for intent in unfinished:
            try:
                cardio = await self.cardio.get(intent.cardio_id)
            except RecordNotFoundError:
                logger.warning(
                    "Cardio record for unfinished intent no longer exists",
                    extra={"cardio_id": intent.cardio_id, "intent_status": intent.status},
                )
                # A created debt stays; only an intent with no debt is dropped
                if intent.status == INTENT_PENDING:
                    self.intents.discard(intent)
                else:
                    self.intents.complete(intent)
                continue

            logger.warning(
                "Replaying unfinished missed-cardio intent",
                extra={"cardio_id": intent.cardio_id, "intent_status": intent.status},
            )

            if intent.status == INTENT_PENDING:
                if cardio.status != CardioStatus.PENDING:
                    # Resolved elsewhere before any debt was recorded
                    self.intents.discard(intent)
                    continue
                debt = await self.debt.create(
                    to_decimal(intent.debt_amount),
                    missed_cardio_reason(intent.cardio_kind),
                    source="missed_cardio",
                )
                self.intents.mark_debt_created(intent, debt.id)
                debts.append(debt)

            if cardio.status == CardioStatus.PENDING:
                missed.append(await self.cardio.mark_missed(intent.cardio_id))
            self.intents.complete(intent)

        return debts, missed, len(unfinished)

    async def calculate_daily_workout_earnings(self) -> DailyEarnings:
        """Step 3: today's sessions, thresholded by the week's cumulative yoga count"""
        today = self.clock()
        todays_workouts = await self.workout.get_for_day(today)
        week_workouts = await self.workout.get_for_week()
        return calculate_daily_earnings(
            today,
            todays_workouts,
            week_workouts,
            self.workout.yoga_kind,
            self.workout.lifting_kind,
        )

    async def check_weekly_bonuses(self) -> BonusCheckResult:
        """
        Step 4: on the end-of-week day, evaluate the week that just finished.

        A week already holding a Perfect Week bonus is not awarded again.
        """
        today = self.clock()
        if not is_end_of_week(today):
            return BonusCheckResult(
                is_end_of_week=False,
                week_start=None,
                weekly_earnings=None,
                bonuses_added=[],
                total_bonuses=ZERO,
            )

        week_start = start_of_week(today) - timedelta(days=7)
        weekly = await self.workout.calculate_weekly_earnings(week_start)
        added: List[Bonus] = []

        if weekly.perfect_week_bonus > 0:
            existing = await self.bonus.get_for_week(week_start)
            if any(b.bonus_type == PERFECT_WEEK for b in existing):
                logger.info("Perfect Week already awarded", extra={"week_of": week_start.isoformat()})
            else:
                added.append(await self.bonus.award_perfect_week(week_start))

        return BonusCheckResult(
            is_end_of_week=True,
            week_start=week_start,
            weekly_earnings=weekly,
            bonuses_added=added,
            total_bonuses=sum((b.amount for b in added), ZERO),
        )

    async def calculate_transfer_approvals(
        self,
        workout_earnings=ZERO,
        bonus_earnings=ZERO,
        uber_earnings=ZERO,
    ) -> TransferApproval:
        """
        Step 5: transfer ceiling plus the debt gate.

        Outstanding debt flags Uber earnings as blocked; the ceiling itself is
        not reduced.
        """
        workout_earnings = to_decimal(workout_earnings)
        bonus_earnings = to_decimal(bonus_earnings)
        uber_earnings = to_decimal(uber_earnings)

        calculation = await self.balance.calculate_available_transfers(workout_earnings, bonus_earnings, uber_earnings)
        debt_total = await self.debt.get_total()
        has_debt = debt_total.total_debt > 0

        approved: List[str] = []
        if workout_earnings > 0:
            approved.append(f"Workout earnings: {format_currency(workout_earnings)}")
        if bonus_earnings > 0:
            approved.append(f"Bonus earnings: {format_currency(bonus_earnings)}")
        if uber_earnings > 0 and not has_debt:
            approved.append(f"Uber earnings: {format_currency(uber_earnings)}")

        return TransferApproval(
            calculation=calculation,
            has_debt=has_debt,
            debt_amount=debt_total.total_debt,
            uber_earnings_blocked=has_debt and uber_earnings > 0,
            approved_transfers=approved,
        )

    async def process_uber_earnings(self, amount) -> UberEarningsOutcome:
        """
        Route delivery earnings: pay the oldest debt when any is outstanding,
        otherwise report an equal unlock from Account A (no money moves).
        """
        amount = require_positive(amount, "amount")
        debt_total = await self.debt.get_total()

        if debt_total.total_debt > 0:
            payment = await self.debt.pay_off_oldest(amount)
            if payment is not None:
                applied = amount - payment.remaining_payment
                return UberEarningsOutcome(
                    action="debt_payment",
                    amount=amount,
                    remaining_debt=payment.remaining_amount,
                    total_remaining_debt=max(ZERO, debt_total.total_debt - applied),
                    unapplied_payment=payment.remaining_payment,
                    unlocked_amount=ZERO,
                    message=f"{format_currency(amount)} Uber earnings applied to debt",
                )

        return UberEarningsOutcome(
            action="earnings_unlock",
            amount=amount,
            remaining_debt=ZERO,
            total_remaining_debt=ZERO,
            unapplied_payment=ZERO,
            unlocked_amount=amount,
            message=f"{format_currency(amount)} Uber earnings unlock equal amount from Account A",
        )

    async def manual_cardio_completion(self, cardio_id: str) -> CardioAssignment:
        return await self.cardio.complete(cardio_id)

    async def manual_bonus_award(self, amount, reason: str = "Exceptional effort") -> Bonus:
        return await self.bonus.award_good_boy(amount, reason)
