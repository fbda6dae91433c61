"""GET /dashboard - aggregate view across all five collections"""

import asyncio

from fastapi import APIRouter, Depends

from accountability_gateway.api.dependencies import get_services
from accountability_gateway.api.responses import success
from accountability_gateway.bootstrap import AccountabilityServices

router = APIRouter()


@router.get("/dashboard")
async def get_dashboard(services: AccountabilityServices = Depends(get_services)):
    """Fetch every section concurrently; any failing section fails the request"""
    pending_cardio, debt_total, weekly_earnings, pending_bonuses, balance_summary = await asyncio.gather(
        services.cardio.get_pending(),
        services.debt.get_total(),
        services.workout.calculate_weekly_earnings(),
        services.bonus.calculate_total_pending(),
        services.balance.generate_summary(),
    )
    return success(
        {
            "cardio": {"pending": pending_cardio, "pending_count": len(pending_cardio)},
            "debt": debt_total,
            "workouts": weekly_earnings,
            "bonuses": pending_bonuses,
            "balances": balance_summary,
        }
    )
