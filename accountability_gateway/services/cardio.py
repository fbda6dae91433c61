"""Cardio punishment assignments"""

import logging
from typing import List, Optional

from accountability_gateway.domain.exceptions import InvalidStateTransitionError, ValidationFailedError
from accountability_gateway.domain.models import CardioAssignment, CardioKind, CardioStats, CardioStatus
from accountability_gateway.domain.rules import require_positive_int
from accountability_gateway.infrastructure.store import properties as props
from accountability_gateway.infrastructure.store.base import Record, RecordStore
from accountability_gateway.infrastructure.store.schema import CARDIO
from accountability_gateway.utils.date_utils import Clock, cutoff_date

logger = logging.getLogger(__name__)


def parse_cardio(record: Record) -> CardioAssignment:
    return CardioAssignment(
        id=record["id"],
        name=props.read_title(record),
        kind=props.read_select(record, CARDIO.kind),
        required_minutes=int(props.read_number(record, CARDIO.minutes) or 0),
        date_assigned=props.read_date(record, CARDIO.date_assigned),
        date_completed=props.read_date(record, CARDIO.date_completed),
        status=CardioStatus(props.read_select(record, CARDIO.status) or CardioStatus.PENDING.value),
    )


class CardioService:
    """Assign, complete and sweep cardio obligations"""

    def __init__(self, store: RecordStore, database_id: str, clock: Clock):
        self.store = store
        self.database_id = database_id
        self.clock = clock

    async def assign(self, kind: str, minutes: int, reason: Optional[str] = None) -> CardioAssignment:
        """
        Create a pending assignment dated today.

        Raises:
            ValidationFailedError: Unknown kind or non-positive minutes
        """
        try:
            kind = CardioKind(kind).value
        except ValueError as e:
            raise ValidationFailedError(f"Unknown cardio type: {kind!r}") from e
        minutes = require_positive_int(minutes, "minutes")

        today = self.clock()
        title = f"{minutes}min {kind}" + (f" - {reason}" if reason else "")
        properties = {
            CARDIO.date_assigned: props.date_value(today),
            CARDIO.kind: props.select_value(kind),
            CARDIO.minutes: props.number_value(minutes),
            CARDIO.status: props.select_value(CardioStatus.PENDING.value),
        }

        record = await self.store.create(self.database_id, properties, title)
        logger.info(
            "Cardio punishment assigned",
            extra={"cardio_id": record["id"], "kind": kind, "minutes": minutes, "reason": reason},
        )
        return CardioAssignment(
            id=record["id"],
            name=title,
            kind=kind,
            required_minutes=minutes,
            date_assigned=today,
            status=CardioStatus.PENDING,
        )

    async def get(self, cardio_id: str) -> CardioAssignment:
        return parse_cardio(await self.store.get(cardio_id))

    async def complete(self, cardio_id: str) -> CardioAssignment:
        """
        Mark an assignment completed today.

        Raises:
            RecordNotFoundError: Unknown id
            InvalidStateTransitionError: Assignment already missed
        """
        cardio = await self.get(cardio_id)
        if cardio.status == CardioStatus.COMPLETED:
            return cardio
        if cardio.status != CardioStatus.PENDING:
            raise InvalidStateTransitionError(f"Cardio {cardio_id} is {cardio.status.value}; cannot complete")

        today = self.clock()
        await self.store.update(
            cardio_id,
            {
                CARDIO.date_completed: props.date_value(today),
                CARDIO.status: props.select_value(CardioStatus.COMPLETED.value),
            },
        )
        logger.info("Cardio marked as completed", extra={"cardio_id": cardio_id})
        cardio.status = CardioStatus.COMPLETED
        cardio.date_completed = today
        return cardio

    async def mark_missed(self, cardio_id: str) -> CardioAssignment:
        """
        Mark an assignment missed. Repeating the call leaves a missed record unchanged.

        Raises:
            RecordNotFoundError: Unknown id
            InvalidStateTransitionError: Assignment already completed
        """
        cardio = await self.get(cardio_id)
        if cardio.status == CardioStatus.MISSED:
            return cardio
        if cardio.status != CardioStatus.PENDING:
            raise InvalidStateTransitionError(f"Cardio {cardio_id} is {cardio.status.value}; cannot mark missed")

        await self.store.update(cardio_id, {CARDIO.status: props.select_value(CardioStatus.MISSED.value)})
        logger.warning("Cardio marked as missed", extra={"cardio_id": cardio_id})
        cardio.status = CardioStatus.MISSED
        return cardio

    async def get_pending(self) -> List[CardioAssignment]:
        """Pending assignments, oldest first"""
        records = await self.store.query(
            self.database_id,
            props.select_equals(CARDIO.status, CardioStatus.PENDING.value),
            props.ascending(CARDIO.date_assigned),
        )
        return [parse_cardio(r) for r in records]

    async def get_overdue(self) -> List[CardioAssignment]:
        """Pending assignments dated before today (each is due by the end of its day)"""
        records = await self.store.query(
            self.database_id,
            props.all_of(
                props.select_equals(CARDIO.status, CardioStatus.PENDING.value),
                props.date_before(CARDIO.date_assigned, self.clock()),
            ),
            props.ascending(CARDIO.date_assigned),
        )
        return [parse_cardio(r) for r in records]

    async def get_stats(self, window_days: int = 30) -> CardioStats:
        records = await self.store.query(
            self.database_id,
            props.date_on_or_after(CARDIO.date_assigned, cutoff_date(self.clock(), window_days)),
        )
        assignments = [parse_cardio(r) for r in records]

        completed = [a for a in assignments if a.status == CardioStatus.COMPLETED]
        total = len(assignments)
        return CardioStats(
            window_days=window_days,
            total=total,
            completed=len(completed),
            pending=sum(1 for a in assignments if a.status == CardioStatus.PENDING),
            missed=sum(1 for a in assignments if a.status == CardioStatus.MISSED),
            total_minutes=sum(a.required_minutes for a in assignments),
            completed_minutes=sum(a.required_minutes for a in completed),
            completion_rate=round(len(completed) / total * 100, 1) if total else 0.0,
        )
