"""/debt - debt assignment, interest and payment endpoints"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from accountability_gateway.api.dependencies import get_notifier, get_services
from accountability_gateway.api.responses import success
from accountability_gateway.api.routes.schemas import DebtCreateRequest, PaymentRequest
from accountability_gateway.bootstrap import AccountabilityServices
from accountability_gateway.infrastructure.clients.discord import DiscordNotifier

router = APIRouter(prefix="/debt")


@router.post("/create")
async def create_debt(
    request_body: DebtCreateRequest,
    background_tasks: BackgroundTasks,
    services: AccountabilityServices = Depends(get_services),
    notifier: DiscordNotifier = Depends(get_notifier),
):
    debt = await services.debt.create(request_body.amount, request_body.reason)
    background_tasks.add_task(notifier.send_debt_assignment, debt.original_amount, request_body.reason)
    return success(debt)


@router.get("/active")
async def get_active_debts(services: AccountabilityServices = Depends(get_services)):
    return success(await services.debt.get_active())


@router.get("/total")
async def get_total_debt(services: AccountabilityServices = Depends(get_services)):
    return success(await services.debt.get_total())


@router.get("/stats")
async def get_debt_stats(
    days: int = Query(30, gt=0, description="Window in days"),
    services: AccountabilityServices = Depends(get_services),
):
    return success(await services.debt.get_stats(days))


@router.post("/apply-interest")
async def apply_interest(services: AccountabilityServices = Depends(get_services)):
    """Manual trigger for the daily interest step"""
    return success(await services.debt.apply_daily_interest())


@router.post("/pay-oldest")
async def pay_oldest_debt(request_body: PaymentRequest, services: AccountabilityServices = Depends(get_services)):
    """Pay the oldest active debt; data is null when nothing is owed"""
    return success(await services.debt.pay_off_oldest(request_body.amount))


@router.post("/options")
async def present_debt_options(
    background_tasks: BackgroundTasks,
    services: AccountabilityServices = Depends(get_services),
    notifier: DiscordNotifier = Depends(get_notifier),
):
    """Send the pay-or-work-it-off choice for the current total debt"""
    total = await services.debt.get_total()
    if total.total_debt > 0:
        background_tasks.add_task(notifier.send_choice_presentation, total.total_debt)
    return success(total)


@router.post("/{debt_id}/pay")
async def pay_debt(
    debt_id: str,
    request_body: PaymentRequest,
    services: AccountabilityServices = Depends(get_services),
):
    return success(await services.debt.pay_off(debt_id, request_body.amount))
