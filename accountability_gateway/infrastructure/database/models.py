"""SQLAlchemy ORM models for the local run ledger"""

import uuid
from sqlalchemy import Column, Date, DateTime, Numeric, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class ReconciliationRun(Base):
    """One execution of the nightly pipeline"""

    __tablename__ = "reconciliation_run"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    run_date = Column(Date, nullable=False, index=True)
    trigger = Column(Text, nullable=False, default="scheduled")
    status = Column(Text, nullable=False, default="running")
    summary = Column(Text, nullable=True)
    error = Column(Text, nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    finished_at = Column(DateTime(timezone=True), nullable=True)


class InterestAccrual(Base):
    """Watermark: interest applied to a debt on a calendar day"""

    __tablename__ = "interest_accrual"
    __table_args__ = (UniqueConstraint("debt_id", "accrual_date", name="uq_interest_accrual_debt_day"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    debt_id = Column(Text, nullable=False, index=True)
    accrual_date = Column(Date, nullable=False)
    old_amount = Column(Numeric(12, 2), nullable=False)
    new_amount = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class MissedCardioIntent(Base):
    """Intent log for the create-debt-then-mark-missed pair of remote writes"""

    __tablename__ = "missed_cardio_intent"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    cardio_id = Column(Text, nullable=False, unique=True)
    cardio_kind = Column(Text, nullable=False)
    debt_amount = Column(Numeric(12, 2), nullable=False)
    status = Column(Text, nullable=False, default="pending")  # pending | debt_created | completed
    debt_id = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())
