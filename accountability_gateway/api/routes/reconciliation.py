"""/reconciliation - manual triggers and run history"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.orm import Session

from accountability_gateway.api.dependencies import get_notifier, get_request_id, get_services
from accountability_gateway.api.responses import success
from accountability_gateway.api.routes.schemas import ReconciliationRunRequest, UberEarningsRequest
from accountability_gateway.bootstrap import AccountabilityServices
from accountability_gateway.infrastructure.clients.discord import DiscordNotifier
from accountability_gateway.infrastructure.database.repositories import RunRepository
from accountability_gateway.infrastructure.database.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reconciliation")


@router.post("/run")
async def run_reconciliation(
    request: Request,
    background_tasks: BackgroundTasks,
    request_body: ReconciliationRunRequest | None = None,
    services: AccountabilityServices = Depends(get_services),
    notifier: DiscordNotifier = Depends(get_notifier),
):
    """
    Run the nightly pipeline on demand.

    The rendered summary is posted to the webhook after the response is sent.
    """
    uber_earnings = request_body.uber_earnings if request_body else 0
    logger.info("Manual reconciliation requested", extra={"request_id": get_request_id(request)})

    result = await services.reconciliation.run_nightly(uber_earnings, trigger="manual")
    background_tasks.add_task(notifier.send_reconciliation_summary, result.summary)
    return success(result)


@router.post("/overdue")
async def process_overdue(services: AccountabilityServices = Depends(get_services)):
    """Run only the overdue cardio sweep"""
    return success(await services.reconciliation.process_overdue_cardio())


@router.post("/uber-earnings")
async def process_uber_earnings(
    request_body: UberEarningsRequest,
    services: AccountabilityServices = Depends(get_services),
):
    return success(await services.reconciliation.process_uber_earnings(request_body.amount))


@router.get("/runs")
def get_run_history(
    limit: int = Query(20, gt=0, le=100),
    db: Session = Depends(get_db),
):
    """Recent reconciliation runs, newest first"""
    runs = RunRepository(db).get_recent_runs(limit)
    return success(
        [
            {
                "run_id": str(run.id),
                "run_date": run.run_date,
                "trigger": run.trigger,
                "status": run.status,
                "error": run.error,
                "started_at": run.started_at,
                "finished_at": run.finished_at,
            }
            for run in runs
        ]
    )
