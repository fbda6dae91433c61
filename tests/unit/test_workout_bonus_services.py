"""Unit tests for workout logging and bonus awards"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from accountability_gateway.domain.exceptions import RecordNotFoundError, ValidationFailedError
from accountability_gateway.domain.models import BonusStatus

WEEK_START = date(2024, 3, 10)


async def log_on(services, clock, day: date, kind: str, minutes: int = 45):
    saved = clock.today
    clock.today = day
    try:
        return await services.workout.log(kind, minutes)
    finally:
        clock.today = saved


class TestWorkoutService:
    """Test workout logging and weekly queries"""

    async def test_log_workout(self, services, clock):
        workout = await services.workout.log("Lifting", 60, "watch", calories=420)

        assert workout.date == clock.today
        assert workout.source == "watch"
        assert workout.name == "Lifting - 60min (420 cal)"

    @pytest.mark.parametrize(
        "kind, minutes, source",
        [("", 30, "manual"), ("Yoga", 0, "manual"), ("Yoga", 30, "phone")],
    )
    async def test_log_rejects_bad_input(self, services, kind, minutes, source):
        with pytest.raises(ValidationFailedError):
            await services.workout.log(kind, minutes, source)

    async def test_week_window_is_sunday_to_saturday(self, services, clock):
        await log_on(services, clock, WEEK_START - timedelta(days=1), "Yoga")
        inside = [
            await log_on(services, clock, WEEK_START, "Yoga"),
            await log_on(services, clock, WEEK_START + timedelta(days=6), "Lifting"),
        ]
        await log_on(services, clock, WEEK_START + timedelta(days=7), "Yoga")

        week = await services.workout.get_for_week()

        assert [w.id for w in week] == [w.id for w in inside]

    async def test_weekly_earnings_and_baseline(self, services, clock):
        for offset in range(4):
            await log_on(services, clock, WEEK_START + timedelta(days=offset), "Yoga")
        for offset in range(3):
            await log_on(services, clock, WEEK_START + timedelta(days=offset), "Lifting")

        earnings = await services.workout.calculate_weekly_earnings()
        baseline = await services.workout.check_baseline_compliance()

        assert earnings.week_start == WEEK_START
        assert earnings.lifting_earnings == Decimal("30")
        assert earnings.extra_yoga_earnings == Decimal("5")
        assert earnings.perfect_week_bonus == Decimal("50")
        assert baseline.compliant is True

    async def test_get_for_today(self, services, clock):
        await log_on(services, clock, clock.today - timedelta(days=1), "Yoga")
        today = await services.workout.log("Yoga", 30)

        assert [w.id for w in await services.workout.get_for_today()] == [today.id]

    async def test_stats(self, services):
        await services.workout.log("Yoga", 30)
        await services.workout.log("Yoga", 60, "watch")
        await services.workout.log("Lifting", 45)

        stats = await services.workout.get_stats(30)

        assert stats.total_workouts == 3
        assert stats.total_duration == 135
        assert stats.by_type == {"Yoga": 2, "Lifting": 1}
        assert stats.by_source == {"manual": 2, "watch": 1}
        assert stats.average_per_day == 0.1
        assert stats.average_duration == 45.0


class TestBonusService:
    """Test bonus awards, presets and payout"""

    async def test_award_defaults_to_current_week(self, services):
        bonus = await services.bonus.award("AlgoExpert", Decimal("25"), description="7 problems completed")

        assert bonus.week_of == WEEK_START
        assert bonus.status == BonusStatus.PENDING
        assert bonus.name == "AlgoExpert - $25.00 (Week of 2024-03-10): 7 problems completed"

    @pytest.mark.parametrize("bonus_type, amount", [("", 10), ("Reading", 0)])
    async def test_award_rejects_bad_input(self, services, bonus_type, amount):
        with pytest.raises(ValidationFailedError):
            await services.bonus.award(bonus_type, amount)

    async def test_presets(self, services):
        week = WEEK_START - timedelta(days=7)
        awarded = [
            await services.bonus.award_perfect_week(week),
            await services.bonus.award_job_applications(week, 30),
            await services.bonus.award_algoexpert(week),
            await services.bonus.award_reading(week, "Dune"),
            await services.bonus.award_dating(week),
            await services.bonus.award_good_boy(Decimal("15"), "Cleaned the apartment"),
        ]

        assert [b.amount for b in awarded] == [Decimal(v) for v in ("50", "50", "25", "25", "30", "15")]
        assert awarded[1].name.endswith("30+ applications submitted")
        assert awarded[3].name.endswith("Finished: Dune")
        assert awarded[5].week_of == WEEK_START

        for_week = await services.bonus.get_for_week(week)
        assert len(for_week) == 5

    async def test_mark_paid_is_idempotent(self, services, store):
        bonus = await services.bonus.award_reading()

        paid = await services.bonus.mark_paid(bonus.id)
        again = await services.bonus.mark_paid(bonus.id)

        assert paid.status == BonusStatus.PAID
        assert again.status == BonusStatus.PAID
        assert sum(1 for call in store.calls if call[0] == "update") == 1

    async def test_mark_paid_unknown_id(self, services):
        with pytest.raises(RecordNotFoundError):
            await services.bonus.mark_paid("missing")

    async def test_pending_totals_and_stats(self, services):
        earlier = WEEK_START - timedelta(days=7)
        old = await services.bonus.award_perfect_week(earlier)
        await services.bonus.award_algoexpert()
        await services.bonus.award_dating()
        await services.bonus.mark_paid(old.id)

        pending = await services.bonus.get_pending()
        this_week = await services.bonus.get_pending(WEEK_START)
        total = await services.bonus.calculate_total_pending()
        stats = await services.bonus.get_stats(30)

        assert len(pending) == 2
        assert len(this_week) == 2
        assert total.total_amount == Decimal("55")
        assert total.bonus_count == 2
        assert stats.total_earned == Decimal("105")
        assert stats.total_paid == Decimal("50")
        assert stats.by_type["Perfect Week"] == Decimal("50")
