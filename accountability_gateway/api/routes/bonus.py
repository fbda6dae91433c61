"""/bonus - bonus award and payout endpoints"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from accountability_gateway.api.dependencies import get_services
from accountability_gateway.api.responses import success
from accountability_gateway.api.routes.schemas import BonusAwardRequest, PresetBonusRequest
from accountability_gateway.bootstrap import AccountabilityServices

router = APIRouter(prefix="/bonus")


@router.post("/award")
async def award_bonus(request_body: BonusAwardRequest, services: AccountabilityServices = Depends(get_services)):
    bonus = await services.bonus.award(
        request_body.bonus_type,
        request_body.amount,
        request_body.week_of,
        request_body.description,
    )
    return success(bonus)


@router.post("/job-applications")
async def award_job_applications(
    request_body: PresetBonusRequest,
    services: AccountabilityServices = Depends(get_services),
):
    return success(await services.bonus.award_job_applications(request_body.week_of, request_body.count or 25))


@router.post("/algoexpert")
async def award_algoexpert(request_body: PresetBonusRequest, services: AccountabilityServices = Depends(get_services)):
    return success(await services.bonus.award_algoexpert(request_body.week_of, request_body.count or 7))


@router.post("/reading")
async def award_reading(request_body: PresetBonusRequest, services: AccountabilityServices = Depends(get_services)):
    return success(await services.bonus.award_reading(request_body.week_of, request_body.details))


@router.post("/dating")
async def award_dating(request_body: PresetBonusRequest, services: AccountabilityServices = Depends(get_services)):
    return success(await services.bonus.award_dating(request_body.week_of, request_body.details))


@router.get("/pending")
async def get_pending_bonuses(
    week_of: Optional[date] = Query(None),
    services: AccountabilityServices = Depends(get_services),
):
    return success(await services.bonus.get_pending(week_of))


@router.get("/week")
async def get_week_bonuses(
    week_of: Optional[date] = Query(None),
    services: AccountabilityServices = Depends(get_services),
):
    return success(await services.bonus.get_for_week(week_of))


@router.get("/total-pending")
async def get_total_pending(services: AccountabilityServices = Depends(get_services)):
    return success(await services.bonus.calculate_total_pending())


@router.get("/stats")
async def get_bonus_stats(
    days: int = Query(30, gt=0, description="Window in days"),
    services: AccountabilityServices = Depends(get_services),
):
    return success(await services.bonus.get_stats(days))


@router.post("/{bonus_id}/paid")
async def mark_bonus_paid(bonus_id: str, services: AccountabilityServices = Depends(get_services)):
    return success(await services.bonus.mark_paid(bonus_id))
