"""Data access layer for the run ledger"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional, Set

from sqlalchemy.orm import Session

from accountability_gateway.infrastructure.database.models import (
    InterestAccrual,
    MissedCardioIntent,
    ReconciliationRun,
)

INTENT_PENDING = "pending"
INTENT_DEBT_CREATED = "debt_created"
INTENT_COMPLETED = "completed"


class RunRepository:
    """Repository for reconciliation run history"""

    def __init__(self, db: Session):
        self.db = db

    def start_run(self, run_date: date, trigger: str) -> ReconciliationRun:
        run = ReconciliationRun(run_date=run_date, trigger=trigger, status="running")
        self.db.add(run)
        self.db.commit()
        return run

    def finish_run(self, run_id: uuid.UUID, summary: str) -> None:
        run = self.db.get(ReconciliationRun, run_id)
        run.status = "succeeded"
        run.summary = summary
        run.finished_at = datetime.now(timezone.utc)
        self.db.commit()

    def fail_run(self, run_id: uuid.UUID, error: str) -> None:
        # A failed remote call may leave the session mid-transaction
        self.db.rollback()
        run = self.db.get(ReconciliationRun, run_id)
        run.status = "failed"
        run.error = error
        run.finished_at = datetime.now(timezone.utc)
        self.db.commit()

    def get_recent_runs(self, limit: int = 20) -> List[ReconciliationRun]:
        return (
            self.db.query(ReconciliationRun)
            .order_by(ReconciliationRun.run_date.desc(), ReconciliationRun.started_at.desc())
            .limit(limit)
            .all()
        )


class AccrualRepository:
    """Repository for per-debt daily interest watermarks"""

    def __init__(self, db: Session):
        self.db = db

    def accrued_debt_ids(self, accrual_date: date) -> Set[str]:
        rows = (
            self.db.query(InterestAccrual.debt_id)
            .filter(InterestAccrual.accrual_date == accrual_date)
            .all()
        )
        return {row.debt_id for row in rows}

    def record_accrual(self, debt_id: str, accrual_date: date, old_amount: Decimal, new_amount: Decimal) -> None:
        self.db.add(
            InterestAccrual(
                debt_id=debt_id,
                accrual_date=accrual_date,
                old_amount=old_amount,
                new_amount=new_amount,
            )
        )
        self.db.commit()


class IntentRepository:
    """Repository for missed-cardio intents (debt creation + mark missed)"""

    def __init__(self, db: Session):
        self.db = db

    def open_intent(self, cardio_id: str, cardio_kind: str, debt_amount: Decimal) -> MissedCardioIntent:
        """Record the intent before the first remote write"""
        intent = self.get_by_cardio_id(cardio_id)
        if intent is not None:
            # Assignment was reopened after an earlier sweep
            intent.cardio_kind = cardio_kind
            intent.debt_amount = debt_amount
            intent.status = INTENT_PENDING
            intent.debt_id = None
            self.db.commit()
            return intent

        intent = MissedCardioIntent(
            cardio_id=cardio_id,
            cardio_kind=cardio_kind,
            debt_amount=debt_amount,
            status=INTENT_PENDING,
        )
        self.db.add(intent)
        self.db.commit()
        return intent

    def mark_debt_created(self, intent: MissedCardioIntent, debt_id: str) -> None:
        intent.status = INTENT_DEBT_CREATED
        intent.debt_id = debt_id
        self.db.commit()

    def complete(self, intent: MissedCardioIntent) -> None:
        intent.status = INTENT_COMPLETED
        self.db.commit()

    def discard(self, intent: MissedCardioIntent) -> None:
        """Drop an intent whose first write is known to have failed"""
        self.db.rollback()
        self.db.delete(intent)
        self.db.commit()

    def get_by_cardio_id(self, cardio_id: str) -> Optional[MissedCardioIntent]:
        return (
            self.db.query(MissedCardioIntent)
            .filter(MissedCardioIntent.cardio_id == cardio_id)
            .first()
        )

    def get_unfinished(self) -> List[MissedCardioIntent]:
        return (
            self.db.query(MissedCardioIntent)
            .filter(MissedCardioIntent.status != INTENT_COMPLETED)
            .order_by(MissedCardioIntent.created_at.asc())
            .all()
        )
