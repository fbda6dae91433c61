"""/workout - workout logging and earnings endpoints"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from accountability_gateway.api.dependencies import get_notifier, get_services
from accountability_gateway.api.responses import success
from accountability_gateway.api.routes.schemas import WorkoutLogRequest
from accountability_gateway.bootstrap import AccountabilityServices
from accountability_gateway.domain.rules import LIFTING_SESSION_EARNINGS
from accountability_gateway.infrastructure.clients.discord import DiscordNotifier

router = APIRouter(prefix="/workout")


@router.post("/log")
async def log_workout(
    request_body: WorkoutLogRequest,
    background_tasks: BackgroundTasks,
    services: AccountabilityServices = Depends(get_services),
    notifier: DiscordNotifier = Depends(get_notifier),
):
    workout = await services.workout.log(
        request_body.kind,
        request_body.duration_minutes,
        request_body.source.value,
        request_body.calories,
    )
    # Every lifting session pays; yoga only counts past the weekly baseline
    if workout.kind == services.workout.lifting_kind:
        background_tasks.add_task(notifier.send_workout_earning, workout.kind, LIFTING_SESSION_EARNINGS)
    return success(workout)


@router.get("/today")
async def get_todays_workouts(services: AccountabilityServices = Depends(get_services)):
    return success(await services.workout.get_for_today())


@router.get("/week")
async def get_week_workouts(
    week_start: Optional[date] = Query(None, description="Sunday starting the week; defaults to this week"),
    services: AccountabilityServices = Depends(get_services),
):
    return success(await services.workout.get_for_week(week_start))


@router.get("/earnings")
async def get_weekly_earnings(
    week_start: Optional[date] = Query(None),
    services: AccountabilityServices = Depends(get_services),
):
    return success(await services.workout.calculate_weekly_earnings(week_start))


@router.get("/baseline")
async def get_baseline_compliance(
    week_start: Optional[date] = Query(None),
    services: AccountabilityServices = Depends(get_services),
):
    return success(await services.workout.check_baseline_compliance(week_start))


@router.get("/stats")
async def get_workout_stats(
    days: int = Query(30, gt=0, description="Window in days"),
    services: AccountabilityServices = Depends(get_services),
):
    return success(await services.workout.get_stats(days))
