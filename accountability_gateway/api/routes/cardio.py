"""/cardio - cardio assignment endpoints"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from accountability_gateway.api.dependencies import get_notifier, get_services
from accountability_gateway.api.responses import success
from accountability_gateway.api.routes.schemas import CardioAssignRequest
from accountability_gateway.bootstrap import AccountabilityServices
from accountability_gateway.infrastructure.clients.discord import DiscordNotifier

router = APIRouter(prefix="/cardio")


@router.post("/assign")
async def assign_cardio(
    request_body: CardioAssignRequest,
    background_tasks: BackgroundTasks,
    services: AccountabilityServices = Depends(get_services),
    notifier: DiscordNotifier = Depends(get_notifier),
):
    """Assign cardio and notify the webhook once the response is sent"""
    cardio = await services.cardio.assign(request_body.kind.value, request_body.minutes, request_body.reason)
    background_tasks.add_task(
        notifier.send_cardio_assignment,
        cardio.kind,
        cardio.required_minutes,
        request_body.reason or "Assigned",
    )
    return success(cardio)


@router.post("/{cardio_id}/complete")
async def complete_cardio(cardio_id: str, services: AccountabilityServices = Depends(get_services)):
    return success(await services.reconciliation.manual_cardio_completion(cardio_id))


@router.post("/{cardio_id}/missed")
async def mark_cardio_missed(cardio_id: str, services: AccountabilityServices = Depends(get_services)):
    return success(await services.cardio.mark_missed(cardio_id))


@router.get("/pending")
async def get_pending_cardio(services: AccountabilityServices = Depends(get_services)):
    return success(await services.cardio.get_pending())


@router.get("/overdue")
async def get_overdue_cardio(services: AccountabilityServices = Depends(get_services)):
    return success(await services.cardio.get_overdue())


@router.get("/stats")
async def get_cardio_stats(
    days: int = Query(30, gt=0, description="Window in days"),
    services: AccountabilityServices = Depends(get_services),
):
    return success(await services.cardio.get_stats(days))
