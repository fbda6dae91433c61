"""/balance - account snapshot and transfer endpoints"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query

from accountability_gateway.api.dependencies import get_services
from accountability_gateway.api.responses import success
from accountability_gateway.api.routes.schemas import BalanceUpdateRequest
from accountability_gateway.bootstrap import AccountabilityServices

router = APIRouter(prefix="/balance")


@router.post("/update")
async def update_balances(request_body: BalanceUpdateRequest, services: AccountabilityServices = Depends(get_services)):
    snapshot = await services.balance.update(request_body.account_a, request_body.account_b, request_body.checking)
    return success(snapshot)


@router.get("/latest")
async def get_latest_balances(services: AccountabilityServices = Depends(get_services)):
    return success(await services.balance.get_latest())


@router.get("/history")
async def get_balance_history(
    days: int = Query(30, gt=0, description="Window in days"),
    services: AccountabilityServices = Depends(get_services),
):
    return success(await services.balance.get_history(days))


@router.get("/transfers")
async def get_available_transfers(
    workout_earnings: Decimal = Query(Decimal("0"), ge=0),
    bonus_earnings: Decimal = Query(Decimal("0"), ge=0),
    uber_earnings: Decimal = Query(Decimal("0"), ge=0),
    services: AccountabilityServices = Depends(get_services),
):
    calculation = await services.balance.calculate_available_transfers(workout_earnings, bonus_earnings, uber_earnings)
    return success(calculation)


@router.get("/refill")
async def get_refill_status(services: AccountabilityServices = Depends(get_services)):
    return success(await services.balance.check_refill_needed())


@router.get("/summary")
async def get_balance_summary(services: AccountabilityServices = Depends(get_services)):
    return success(await services.balance.generate_summary())


@router.get("/uber-earnings")
async def get_uber_earnings(
    previous_account_b: Optional[Decimal] = Query(None, description="Account B balance before the shift"),
    services: AccountabilityServices = Depends(get_services),
):
    return success(await services.balance.calculate_uber_earnings(previous_account_b))


@router.get("/usage")
async def get_account_a_usage(
    days: int = Query(30, gt=0, description="Window in days"),
    services: AccountabilityServices = Depends(get_services),
):
    return success(await services.balance.get_account_a_usage(days))
