"""/quick - one-call shortcuts for common manual actions"""

from fastapi import APIRouter, BackgroundTasks, Depends

from accountability_gateway.api.dependencies import get_notifier, get_services
from accountability_gateway.api.responses import success
from accountability_gateway.api.routes.schemas import GoodBoyBonusRequest
from accountability_gateway.bootstrap import AccountabilityServices
from accountability_gateway.domain.models import CardioKind
from accountability_gateway.infrastructure.clients.discord import DiscordNotifier

router = APIRouter(prefix="/quick")

MISSED_CHECKIN_MINUTES = 20
MISSED_CHECKIN_REASON = "Missed check-in"


@router.post("/perfect-week-bonus")
async def quick_perfect_week(services: AccountabilityServices = Depends(get_services)):
    """Award Perfect Week for the current week"""
    return success(await services.bonus.award_perfect_week())


@router.post("/good-boy-bonus")
async def quick_good_boy_bonus(
    request_body: GoodBoyBonusRequest,
    background_tasks: BackgroundTasks,
    services: AccountabilityServices = Depends(get_services),
    notifier: DiscordNotifier = Depends(get_notifier),
):
    bonus = await services.reconciliation.manual_bonus_award(request_body.amount, request_body.reason)
    background_tasks.add_task(notifier.send_good_boy_bonus, bonus.amount, request_body.reason)
    return success(bonus)


@router.post("/missed-checkin")
async def quick_missed_checkin(
    background_tasks: BackgroundTasks,
    services: AccountabilityServices = Depends(get_services),
    notifier: DiscordNotifier = Depends(get_notifier),
):
    cardio = await services.cardio.assign(CardioKind.TREADMILL.value, MISSED_CHECKIN_MINUTES, MISSED_CHECKIN_REASON)
    background_tasks.add_task(
        notifier.send_cardio_assignment,
        cardio.kind,
        cardio.required_minutes,
        MISSED_CHECKIN_REASON,
    )
    return success(cardio)
