"""Human-readable summaries for the nightly run and account balances"""

from decimal import Decimal
from typing import List, Optional

from accountability_gateway.domain.models import (
    BalanceSnapshot,
    ReconciliationResult,
    RefillStatus,
)
from accountability_gateway.domain.rules import MONTHLY_ALLOWANCE
from accountability_gateway.utils.money import format_currency


def render_balance_summary(latest: Optional[BalanceSnapshot], refill: RefillStatus) -> str:
    if latest is None:
        return "⚠️ No balance data available"

    refill_line = f"⚠️ {refill.message}" if refill.refill_needed else f"✅ {refill.message}"
    return "\n".join(
        [
            f"💳 **Account Balances ({latest.date.isoformat()})**",
            f"• Account A: {format_currency(latest.account_a)}",
            f"• Account B: {format_currency(latest.account_b)}",
            f"• Checking: {format_currency(latest.checking)}",
            f"• Available Transfer: {format_currency(latest.available_transfer)}",
            "",
            refill_line,
        ]
    )


def render_reconciliation_summary(result: ReconciliationResult) -> str:
    """
    Render the nightly report.

    Sections appear in a fixed order and are omitted when their data is empty:
    violations, interest, workout earnings, weekly bonuses, approved transfers,
    outstanding debt, refill warning.
    """
    lines: List[str] = [
        "🌙 **Nightly Reconciliation Summary**",
        f"📅 {result.run_date.isoformat()}",
        "",
    ]

    overdue = result.overdue
    # Includes debts recreated from an interrupted earlier sweep
    if overdue.debts_created:
        new_debt = sum((d.original_amount for d in overdue.debts_created), Decimal("0"))
        lines.append("⚠️ **Violations:**")
        lines.append(f"• {len(overdue.debts_created)} missed cardio assignments")
        lines.append(f"• {format_currency(new_debt)} in new debt assigned")
        lines.append("")

    if result.interest:
        total_interest = sum((c.interest_charged for c in result.interest), Decimal("0"))
        lines.append("📈 **Interest Applied:**")
        lines.append(f"• {format_currency(total_interest)} interest charged on {len(result.interest)} debts")
        lines.append("")

    earnings = result.workout_earnings
    if earnings.total_earnings > 0:
        lines.append("💪 **Today's Workout Earnings:**")
        if earnings.lifting_earnings > 0:
            lines.append(f"• Lifting: {format_currency(earnings.lifting_earnings)}")
        if earnings.extra_yoga_earnings > 0:
            lines.append(f"• Extra Yoga: {format_currency(earnings.extra_yoga_earnings)}")
        lines.append(f"• **Total: {format_currency(earnings.total_earnings)}**")
        lines.append("")

    if result.bonus_check.bonuses_added:
        lines.append("🎉 **Weekly Bonuses Earned:**")
        for bonus in result.bonus_check.bonuses_added:
            lines.append(f"• {bonus.bonus_type}: {format_currency(bonus.amount)}")
        lines.append("")

    transfers = result.transfers
    if transfers.approved_transfers:
        lines.append("💰 **Approved Transfers:**")
        for transfer in transfers.approved_transfers:
            lines.append(f"• {transfer}")
        lines.append(f"• **Total Available: {format_currency(transfers.calculation.max_transfer_allowed)}**")
        lines.append("")

    if transfers.has_debt:
        lines.append(f"⚠️ **Outstanding Debt: {format_currency(transfers.debt_amount)}**")
        if transfers.uber_earnings_blocked:
            lines.append("• Uber earnings blocked until debt is paid")
        lines.append("")

    balance = result.balance_summary
    if balance.refill_needed:
        current = balance.balances.account_a if balance.balances is not None else Decimal("0")
        lines.append("⚠️ **Account A Refill Needed**")
        lines.append(f"• Current balance: {format_currency(current)}")
        lines.append(f"• Suggested refill: {format_currency(balance.refill_amount or MONTHLY_ALLOWANCE)}")

    return "\n".join(lines).rstrip("\n")
