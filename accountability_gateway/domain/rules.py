"""Accountability rules - pure formulas behind debts, earnings and transfers"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from accountability_gateway.domain.exceptions import ValidationFailedError
from accountability_gateway.domain.models import (
    BalanceSnapshot,
    BaselineCompliance,
    DailyEarnings,
    RefillStatus,
    TransferCalculation,
    WeeklyEarnings,
    WorkoutEarning,
    WorkoutLog,
)
from accountability_gateway.utils.money import format_currency, round2, to_decimal

ZERO = Decimal("0")

# Debt policy
MISSED_CARDIO_DEBT = Decimal("50")
DAILY_INTEREST_RATE = Decimal("0.30")

# Workout policy
LIFTING_SESSION_EARNINGS = Decimal("10")
EXTRA_YOGA_EARNINGS = Decimal("5")
YOGA_BASELINE = 3
PERFECT_WEEK_LIFTING = 3
PERFECT_WEEK_BONUS = Decimal("50")

# Balance policy
BASE_WEEKLY_ALLOWANCE = Decimal("50")
MONTHLY_ALLOWANCE = Decimal("600")
LOW_BALANCE_THRESHOLD = MONTHLY_ALLOWANCE * Decimal("0.25")


def require_positive(value, field_name: str) -> Decimal:
    """Reject zero, negative and non-numeric amounts"""
    try:
        amount = to_decimal(value)
    except (ArithmeticError, ValueError) as e:
        raise ValidationFailedError(f"{field_name} must be a number, got {value!r}") from e
    if not amount.is_finite() or amount <= 0:
        raise ValidationFailedError(f"{field_name} must be positive, got {value!r}")
    return amount


def require_positive_int(value, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationFailedError(f"{field_name} must be a positive integer, got {value!r}")
    return value


def accrue_interest(current_amount: Decimal, daily_rate: Decimal) -> Decimal:
    """
    One day of compounding: round2(current * (1 + rate)), half-up.

    Example:
        33.33 at 0.30 -> 43.329 -> 43.33
    """
    return round2(to_decimal(current_amount) * (1 + to_decimal(daily_rate)))


def apply_payment(current_amount: Decimal, payment: Decimal) -> Decimal:
    """Remaining balance after a payment, floored at zero"""
    return max(ZERO, round2(to_decimal(current_amount) - to_decimal(payment)))


def calculate_weekly_earnings(
    workouts: List[WorkoutLog],
    week_start: date,
    yoga_kind: str = "Yoga",
    lifting_kind: str = "Lifting",
) -> WeeklyEarnings:
    """
    Apply the weekly earnings policy to one week of workouts.

    Policy:
    - Every lifting session earns $10
    - Yoga sessions 1-3 are the baseline and earn nothing; the 4th onward earn $5 each
    - Perfect week (>=3 yoga and >=3 lifting) adds a flat $50 bonus

    Sessions are numbered in date order; same-day sessions keep their input order.
    """
    yoga_count = 0
    lifting_count = 0
    other_count = 0
    lifting_earnings = ZERO
    extra_yoga_earnings = ZERO

    for workout in sorted(workouts, key=lambda w: w.date):
        if workout.kind == lifting_kind:
            lifting_count += 1
            lifting_earnings += LIFTING_SESSION_EARNINGS
        elif workout.kind == yoga_kind:
            yoga_count += 1
            if yoga_count > YOGA_BASELINE:
                extra_yoga_earnings += EXTRA_YOGA_EARNINGS
        else:
            other_count += 1

    total_earnings = lifting_earnings + extra_yoga_earnings
    perfect_week = yoga_count >= YOGA_BASELINE and lifting_count >= PERFECT_WEEK_LIFTING
    perfect_week_bonus = PERFECT_WEEK_BONUS if perfect_week else ZERO

    return WeeklyEarnings(
        week_start=week_start,
        yoga_count=yoga_count,
        lifting_count=lifting_count,
        other_count=other_count,
        lifting_earnings=lifting_earnings,
        extra_yoga_earnings=extra_yoga_earnings,
        total_earnings=total_earnings,
        perfect_week_bonus=perfect_week_bonus,
        total_with_bonus=total_earnings + perfect_week_bonus,
    )


def calculate_daily_earnings(
    day: date,
    todays_workouts: List[WorkoutLog],
    week_workouts: List[WorkoutLog],
    yoga_kind: str = "Yoga",
    lifting_kind: str = "Lifting",
) -> DailyEarnings:
    """
    Earnings for one day, using the week's cumulative yoga count as the threshold.

    Today's yoga sessions are numbered after the yoga sessions logged earlier in
    the same week. A session whose weekly ordinal exceeds the baseline earns $5.
    """
    yoga_before_today = sum(1 for w in week_workouts if w.kind == yoga_kind and w.date < day)
    weekly_yoga_count = sum(1 for w in week_workouts if w.kind == yoga_kind)

    lifting_earnings = ZERO
    extra_yoga_earnings = ZERO
    breakdown: List[WorkoutEarning] = []
    yoga_ordinal = yoga_before_today

    for workout in todays_workouts:
        earned = ZERO
        if workout.kind == lifting_kind:
            earned = LIFTING_SESSION_EARNINGS
            lifting_earnings += earned
        elif workout.kind == yoga_kind:
            yoga_ordinal += 1
            if yoga_ordinal > YOGA_BASELINE:
                earned = EXTRA_YOGA_EARNINGS
                extra_yoga_earnings += earned
        breakdown.append(WorkoutEarning(workout=workout, earnings=earned))

    return DailyEarnings(
        day=day,
        weekly_yoga_count=weekly_yoga_count,
        lifting_earnings=lifting_earnings,
        extra_yoga_earnings=extra_yoga_earnings,
        total_earnings=lifting_earnings + extra_yoga_earnings,
        breakdown=breakdown,
    )


def check_baseline(workouts: List[WorkoutLog], yoga_kind: str = "Yoga") -> BaselineCompliance:
    completed = sum(1 for w in workouts if w.kind == yoga_kind)
    remaining = max(0, YOGA_BASELINE - completed)
    compliant = completed >= YOGA_BASELINE

    if compliant:
        message = f"Baseline met: {completed}/{YOGA_BASELINE} yoga sessions"
    else:
        message = f"Baseline incomplete: {completed}/{YOGA_BASELINE} yoga sessions ({remaining} remaining)"

    return BaselineCompliance(
        required=YOGA_BASELINE,
        completed=completed,
        compliant=compliant,
        remaining=remaining,
        message=message,
    )


def calculate_available_transfers(
    workout_earnings: Decimal,
    bonus_earnings: Decimal,
    uber_earnings: Decimal,
    latest: Optional[BalanceSnapshot],
) -> TransferCalculation:
    """
    Transfer ceiling for the week.

    total = $50 base allowance + workout + bonus + uber earnings, capped by the
    latest Account A balance (0 when no snapshot exists).
    """
    workout_earnings = to_decimal(workout_earnings)
    bonus_earnings = to_decimal(bonus_earnings)
    uber_earnings = to_decimal(uber_earnings)

    total = BASE_WEEKLY_ALLOWANCE + workout_earnings + bonus_earnings + uber_earnings
    account_a = latest.account_a if latest is not None else ZERO

    return TransferCalculation(
        base_allowance=BASE_WEEKLY_ALLOWANCE,
        workout_earnings=workout_earnings,
        bonus_earnings=bonus_earnings,
        uber_earnings=uber_earnings,
        total_earnings=total,
        account_a_balance=account_a,
        max_transfer_allowed=min(total, account_a),
        can_transfer_full=total <= account_a,
    )


def check_refill(latest: Optional[BalanceSnapshot]) -> RefillStatus:
    """Account A needs a refill below 25% of the monthly allowance, or when unknown"""
    if latest is None:
        return RefillStatus(
            refill_needed=True,
            current_balance=ZERO,
            threshold=LOW_BALANCE_THRESHOLD,
            suggested_refill=MONTHLY_ALLOWANCE,
            message="No balance data found - refill needed",
        )

    refill_needed = latest.account_a < LOW_BALANCE_THRESHOLD
    if refill_needed:
        message = (
            f"Account A low: {format_currency(latest.account_a)} "
            f"(below {format_currency(LOW_BALANCE_THRESHOLD)})"
        )
    else:
        message = f"Account A sufficient: {format_currency(latest.account_a)}"

    return RefillStatus(
        refill_needed=refill_needed,
        current_balance=latest.account_a,
        threshold=LOW_BALANCE_THRESHOLD,
        suggested_refill=MONTHLY_ALLOWANCE,
        message=message,
    )
