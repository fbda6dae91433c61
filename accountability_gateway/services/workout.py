"""Workout logging and weekly earnings"""

import logging
from collections import Counter
from datetime import date
from typing import List, Optional

from accountability_gateway.domain.exceptions import ValidationFailedError
from accountability_gateway.domain.models import (
    BaselineCompliance,
    WeeklyEarnings,
    WorkoutLog,
    WorkoutSource,
    WorkoutStats,
)
from accountability_gateway.domain.rules import (
    calculate_weekly_earnings,
    check_baseline,
    require_positive_int,
)
from accountability_gateway.infrastructure.store import properties as props
from accountability_gateway.infrastructure.store.base import Record, RecordStore
from accountability_gateway.infrastructure.store.schema import WORKOUT
from accountability_gateway.utils.date_utils import Clock, cutoff_date, end_of_week, start_of_week

logger = logging.getLogger(__name__)


def parse_workout(record: Record) -> WorkoutLog:
    calories = props.read_number(record, WORKOUT.calories)
    return WorkoutLog(
        id=record["id"],
        name=props.read_title(record),
        kind=props.read_select(record, WORKOUT.kind) or "Unknown",
        duration_minutes=int(props.read_number(record, WORKOUT.duration) or 0),
        source=props.read_select(record, WORKOUT.source) or "Unknown",
        date=props.read_date(record, WORKOUT.date),
        calories=int(calories) if calories is not None else None,
    )


class WorkoutService:
    """Owns the Workouts collection and the weekly earnings policy"""

    def __init__(
        self,
        store: RecordStore,
        database_id: str,
        clock: Clock,
        yoga_kind: str = "Yoga",
        lifting_kind: str = "Lifting",
    ):
        self.store = store
        self.database_id = database_id
        self.clock = clock
        self.yoga_kind = yoga_kind
        self.lifting_kind = lifting_kind

    async def log(
        self,
        kind: str,
        duration_minutes: int,
        source: str = WorkoutSource.MANUAL.value,
        calories: Optional[int] = None,
    ) -> WorkoutLog:
        """
        Log a session dated today.

        Raises:
            ValidationFailedError: Empty kind, unknown source, or non-positive duration
        """
        if not kind:
            raise ValidationFailedError("Workout type is required")
        try:
            source = WorkoutSource(source).value
        except ValueError as e:
            raise ValidationFailedError(f"Unknown workout source: {source!r}") from e
        duration_minutes = require_positive_int(duration_minutes, "duration_minutes")
        if calories is not None:
            calories = require_positive_int(calories, "calories")

        today = self.clock()
        title = f"{kind} - {duration_minutes}min" + (f" ({calories} cal)" if calories else "")
        properties = {
            WORKOUT.date: props.date_value(today),
            WORKOUT.kind: props.select_value(kind),
            WORKOUT.duration: props.number_value(duration_minutes),
            WORKOUT.source: props.select_value(source),
        }
        if calories is not None:
            properties[WORKOUT.calories] = props.number_value(calories)

        record = await self.store.create(self.database_id, properties, title)
        logger.info(
            "Workout logged",
            extra={"workout_id": record["id"], "kind": kind, "duration_minutes": duration_minutes},
        )
        return WorkoutLog(
            id=record["id"],
            name=title,
            kind=kind,
            duration_minutes=duration_minutes,
            source=source,
            date=today,
            calories=calories,
        )

    async def get_for_day(self, day: date) -> List[WorkoutLog]:
        records = await self.store.query(self.database_id, props.date_equals(WORKOUT.date, day))
        return [parse_workout(r) for r in records]

    async def get_for_today(self) -> List[WorkoutLog]:
        return await self.get_for_day(self.clock())

    def week_start(self, week_start: Optional[date] = None) -> date:
        return week_start or start_of_week(self.clock())

    async def get_for_week(self, week_start: Optional[date] = None) -> List[WorkoutLog]:
        """Workouts in [week_start, week_start + 6 days], oldest first"""
        start = self.week_start(week_start)
        records = await self.store.query(
            self.database_id,
            props.all_of(
                props.date_on_or_after(WORKOUT.date, start),
                props.date_on_or_before(WORKOUT.date, end_of_week(start)),
            ),
            props.ascending(WORKOUT.date),
        )
        return [parse_workout(r) for r in records]

    async def calculate_weekly_earnings(self, week_start: Optional[date] = None) -> WeeklyEarnings:
        start = self.week_start(week_start)
        workouts = await self.get_for_week(start)
        return calculate_weekly_earnings(workouts, start, self.yoga_kind, self.lifting_kind)

    async def check_baseline_compliance(self, week_start: Optional[date] = None) -> BaselineCompliance:
        workouts = await self.get_for_week(week_start)
        return check_baseline(workouts, self.yoga_kind)

    async def get_stats(self, window_days: int = 30) -> WorkoutStats:
        records = await self.store.query(
            self.database_id,
            props.date_on_or_after(WORKOUT.date, cutoff_date(self.clock(), window_days)),
        )
        workouts = [parse_workout(r) for r in records]
        total = len(workouts)
        total_duration = sum(w.duration_minutes for w in workouts)

        return WorkoutStats(
            window_days=window_days,
            total_workouts=total,
            total_duration=total_duration,
            by_type=dict(Counter(w.kind for w in workouts)),
            by_source=dict(Counter(w.source for w in workouts)),
            average_per_day=round(total / window_days, 1) if window_days else 0.0,
            average_duration=round(total_duration / total, 1) if total else 0.0,
        )
