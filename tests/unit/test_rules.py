"""Unit tests for the earnings, interest and transfer rules"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from accountability_gateway.domain.exceptions import ValidationFailedError
from accountability_gateway.domain.models import BalanceSnapshot, WorkoutLog
from accountability_gateway.domain.rules import (
    accrue_interest,
    apply_payment,
    calculate_available_transfers,
    calculate_daily_earnings,
    calculate_weekly_earnings,
    check_baseline,
    check_refill,
    require_positive,
    require_positive_int,
)
from accountability_gateway.utils.date_utils import cutoff_date, end_of_week, is_end_of_week, start_of_week
from accountability_gateway.utils.money import format_currency, round2

WEEK_START = date(2024, 3, 10)


def make_workout(kind: str, day: date, workout_id: str = "w") -> WorkoutLog:
    return WorkoutLog(id=workout_id, kind=kind, duration_minutes=45, source="manual", date=day)


def snapshot(account_a: str) -> BalanceSnapshot:
    return BalanceSnapshot(
        id="b1",
        date=WEEK_START,
        account_a=Decimal(account_a),
        account_b=Decimal("0"),
        checking=Decimal("0"),
    )


class TestInterestAndPayment:
    """Test compounding and payoff arithmetic"""

    def test_interest_on_round_amount(self):
        """Test 50.00 becomes 65.00"""
        assert accrue_interest(Decimal("50.00"), Decimal("0.30")) == Decimal("65.00")

    def test_interest_rounds_half_up_to_cents(self):
        """Test 33.33 -> 43.329 -> 43.33"""
        assert accrue_interest(Decimal("33.33"), Decimal("0.30")) == Decimal("43.33")

    def test_round2_half_up(self):
        assert round2(Decimal("43.325")) == Decimal("43.33")
        assert round2(Decimal("0.005")) == Decimal("0.01")

    @pytest.mark.parametrize("payment", ["65", "65.00", "100", "1000.50"])
    def test_payment_never_goes_negative(self, payment):
        """Test payments at or above the balance leave exactly zero"""
        assert apply_payment(Decimal("65.00"), Decimal(payment)) == Decimal("0")

    def test_partial_payment(self):
        assert apply_payment(Decimal("65.00"), Decimal("15.50")) == Decimal("49.50")


class TestValidation:
    """Test input validation helpers"""

    @pytest.mark.parametrize("value", [0, -1, "-0.01", "abc", float("nan")])
    def test_require_positive_rejects(self, value):
        with pytest.raises(ValidationFailedError):
            require_positive(value, "amount")

    def test_require_positive_accepts_strings_and_floats(self):
        assert require_positive("12.50", "amount") == Decimal("12.50")
        assert require_positive(0.1, "amount") == Decimal("0.1")

    @pytest.mark.parametrize("value", [0, -5, 1.5, True, "30"])
    def test_require_positive_int_rejects(self, value):
        with pytest.raises(ValidationFailedError):
            require_positive_int(value, "minutes")


class TestWeeklyEarnings:
    """Test the weekly earnings policy"""

    def test_perfect_week(self):
        """Test 3 yoga + 3 lifting earns $30 plus the $50 bonus"""
        workouts = [make_workout("Yoga", WEEK_START + timedelta(days=i)) for i in range(3)]
        workouts += [make_workout("Lifting", WEEK_START + timedelta(days=i)) for i in range(3)]

        earnings = calculate_weekly_earnings(workouts, WEEK_START)

        assert earnings.total_earnings == Decimal("30")
        assert earnings.perfect_week_bonus == Decimal("50")
        assert earnings.total_with_bonus == Decimal("80")

    def test_extra_yoga_only(self):
        """Test sessions 4 and 5 earn $5 each; no lifting means no bonus"""
        workouts = [make_workout("Yoga", WEEK_START + timedelta(days=i)) for i in range(5)]

        earnings = calculate_weekly_earnings(workouts, WEEK_START)

        assert earnings.extra_yoga_earnings == Decimal("10")
        assert earnings.lifting_earnings == Decimal("0")
        assert earnings.perfect_week_bonus == Decimal("0")
        assert earnings.yoga_count == 5

    def test_other_kinds_counted_but_unpaid(self):
        workouts = [make_workout("Cardio", WEEK_START), make_workout("Lifting", WEEK_START)]

        earnings = calculate_weekly_earnings(workouts, WEEK_START)

        assert earnings.other_count == 1
        assert earnings.total_earnings == Decimal("10")

    def test_custom_labels(self):
        workouts = [make_workout("Weights", WEEK_START + timedelta(days=i)) for i in range(2)]

        earnings = calculate_weekly_earnings(workouts, WEEK_START, yoga_kind="Stretch", lifting_kind="Weights")

        assert earnings.lifting_count == 2
        assert earnings.lifting_earnings == Decimal("20")


class TestDailyEarnings:
    """Test today's earnings against the weekly yoga count"""

    def test_yoga_beyond_weekly_baseline_earns(self):
        """Test the 4th yoga session of the week earns even if it is today's first"""
        today = WEEK_START + timedelta(days=3)
        earlier = [make_workout("Yoga", WEEK_START + timedelta(days=i), f"y{i}") for i in range(3)]
        todays = [make_workout("Yoga", today, "today")]

        earnings = calculate_daily_earnings(today, todays, earlier + todays)

        assert earnings.extra_yoga_earnings == Decimal("5")
        assert earnings.weekly_yoga_count == 4
        assert [b.earnings for b in earnings.breakdown] == [Decimal("5")]

    def test_yoga_within_baseline_earns_nothing(self):
        today = WEEK_START + timedelta(days=1)
        earlier = [make_workout("Yoga", WEEK_START, "y0")]
        todays = [make_workout("Yoga", today, "t1"), make_workout("Yoga", today, "t2")]

        earnings = calculate_daily_earnings(today, todays, earlier + todays)

        assert earnings.total_earnings == Decimal("0")

    def test_lifting_and_crossing_the_baseline(self):
        today = WEEK_START + timedelta(days=2)
        earlier = [make_workout("Yoga", WEEK_START + timedelta(days=i), f"y{i}") for i in range(2)]
        todays = [
            make_workout("Yoga", today, "t1"),
            make_workout("Yoga", today, "t2"),
            make_workout("Lifting", today, "t3"),
        ]

        earnings = calculate_daily_earnings(today, todays, earlier + todays)

        assert earnings.extra_yoga_earnings == Decimal("5")
        assert earnings.lifting_earnings == Decimal("10")
        assert earnings.total_earnings == Decimal("15")


class TestBaseline:
    def test_incomplete(self):
        result = check_baseline([make_workout("Yoga", WEEK_START)])
        assert not result.compliant
        assert result.remaining == 2
        assert result.message == "Baseline incomplete: 1/3 yoga sessions (2 remaining)"

    def test_met(self):
        result = check_baseline([make_workout("Yoga", WEEK_START)] * 4)
        assert result.compliant
        assert result.remaining == 0
        assert result.message == "Baseline met: 4/3 yoga sessions"


class TestTransfersAndRefill:
    """Test transfer ceiling and refill thresholds"""

    def test_transfer_capped_by_account_a(self):
        """Test 50+20+50+0 = 120 capped at the 100 balance"""
        calculation = calculate_available_transfers(Decimal("20"), Decimal("50"), Decimal("0"), snapshot("100"))

        assert calculation.total_earnings == Decimal("120")
        assert calculation.max_transfer_allowed == Decimal("100")
        assert calculation.can_transfer_full is False

    def test_transfer_without_snapshot(self):
        calculation = calculate_available_transfers(Decimal("0"), Decimal("0"), Decimal("0"), None)

        assert calculation.account_a_balance == Decimal("0")
        assert calculation.max_transfer_allowed == Decimal("0")

    def test_refill_without_snapshot(self):
        status = check_refill(None)
        assert status.refill_needed is True
        assert status.current_balance == Decimal("0")

    def test_refill_just_below_threshold(self):
        assert check_refill(snapshot("149.99")).refill_needed is True

    def test_refill_at_threshold(self):
        status = check_refill(snapshot("150.00"))
        assert status.refill_needed is False
        assert status.message == "Account A sufficient: $150.00"


class TestDates:
    def test_start_of_week_is_sunday(self):
        assert start_of_week(date(2024, 3, 13)) == WEEK_START
        assert start_of_week(WEEK_START) == WEEK_START
        assert start_of_week(date(2024, 3, 16)) == WEEK_START

    def test_end_of_week(self):
        assert end_of_week(WEEK_START) == date(2024, 3, 16)

    def test_is_end_of_week_on_sunday(self):
        assert is_end_of_week(date(2024, 3, 17))
        assert not is_end_of_week(date(2024, 3, 16))

    def test_cutoff(self):
        assert cutoff_date(date(2024, 3, 31), 30) == date(2024, 3, 1)

    def test_format_currency(self):
        assert format_currency(Decimal("1234.5")) == "$1,234.50"
