"""Unit tests for balance snapshots and transfer eligibility"""

from datetime import timedelta
from decimal import Decimal

import pytest

from accountability_gateway.domain.exceptions import ValidationFailedError


async def snapshot_on(services, clock, days_ago: int, account_a, account_b="0", checking="0"):
    saved = clock.today
    clock.today = saved - timedelta(days=days_ago)
    try:
        return await services.balance.update(Decimal(account_a), Decimal(account_b), Decimal(checking))
    finally:
        clock.today = saved


async def test_update_appends_snapshot(services, store, clock):
    """Test every update creates a new record and the newest wins"""
    await snapshot_on(services, clock, 2, "500")
    latest = await services.balance.update(Decimal("420.10"), Decimal("35"), Decimal("1200"))

    assert len(store.in_collection("balances-db")) == 2
    assert latest.available_transfer == Decimal("420.10")

    fetched = await services.balance.get_latest()
    assert fetched.id == latest.id
    assert fetched.account_a == Decimal("420.10")
    assert fetched.date == clock.today


async def test_update_rejects_non_numbers(services):
    with pytest.raises(ValidationFailedError):
        await services.balance.update("lots", 0, 0)


async def test_latest_without_snapshots(services):
    assert await services.balance.get_latest() is None


async def test_transfers_capped_by_account_a(services):
    await services.balance.update(Decimal("100"), Decimal("0"), Decimal("0"))

    calculation = await services.balance.calculate_available_transfers(Decimal("20"), Decimal("50"), Decimal("0"))

    assert calculation.total_earnings == Decimal("120")
    assert calculation.max_transfer_allowed == Decimal("100")
    assert calculation.can_transfer_full is False


async def test_refill_thresholds(services, clock):
    status = await services.balance.check_refill_needed()
    assert status.refill_needed is True
    assert status.current_balance == Decimal("0")

    await snapshot_on(services, clock, 1, "149.99")
    assert (await services.balance.check_refill_needed()).refill_needed is True

    await services.balance.update(Decimal("150.00"), Decimal("0"), Decimal("0"))
    assert (await services.balance.check_refill_needed()).refill_needed is False


async def test_generate_summary(services):
    empty = await services.balance.generate_summary()
    assert empty.balances is None
    assert empty.refill_needed is True
    assert empty.summary == "⚠️ No balance data available"

    await services.balance.update(Decimal("300"), Decimal("40"), Decimal("900"))
    summary = await services.balance.generate_summary()
    assert summary.refill_needed is False
    assert "✅ Account A sufficient: $300.00" in summary.summary


async def test_uber_earnings_delta(services):
    await services.balance.update(Decimal("300"), Decimal("85.50"), Decimal("900"))

    gained = await services.balance.calculate_uber_earnings(Decimal("40"))
    dropped = await services.balance.calculate_uber_earnings(Decimal("100"))
    unknown = await services.balance.calculate_uber_earnings()

    assert gained.earnings == Decimal("45.50")
    assert dropped.earnings == Decimal("0")
    assert unknown.previous_balance is None
    assert unknown.earnings == Decimal("0")


async def test_history_and_account_a_usage(services, clock):
    await snapshot_on(services, clock, 40, "900")
    await snapshot_on(services, clock, 20, "600")
    await snapshot_on(services, clock, 10, "450")
    await services.balance.update(Decimal("300"), Decimal("0"), Decimal("0"))

    history = await services.balance.get_history(30)
    usage = await services.balance.get_account_a_usage(30)

    assert [s.account_a for s in history] == [Decimal("300"), Decimal("450"), Decimal("600")]
    assert usage.starting_balance == Decimal("600")
    assert usage.current_balance == Decimal("300")
    assert usage.total_used == Decimal("300")
    assert usage.average_daily_use == Decimal("10.00")
    assert usage.projected_monthly_use == Decimal("300.00")


async def test_usage_with_single_snapshot(services):
    await services.balance.update(Decimal("300"), Decimal("0"), Decimal("0"))

    usage = await services.balance.get_account_a_usage(30)

    assert usage.total_used == Decimal("0")
    assert usage.current_balance == Decimal("300")
