"""Pydantic schemas for API request validation"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from accountability_gateway.domain.models import CardioKind, WorkoutSource


class CardioAssignRequest(BaseModel):
    """Request body for POST /cardio/assign"""

    kind: CardioKind = Field(..., description="treadmill, bike, run or stairstepper")
    minutes: int = Field(..., gt=0, description="Required minutes")
    reason: Optional[str] = None


class DebtCreateRequest(BaseModel):
    """Request body for POST /debt/create"""

    amount: Decimal = Field(..., gt=0, description="Debt amount in dollars")
    reason: str = Field("Violation", min_length=1)


class PaymentRequest(BaseModel):
    """Payment applied to one debt or to the oldest debt"""

    amount: Decimal = Field(..., gt=0, description="Payment in dollars")


class WorkoutLogRequest(BaseModel):
    """Request body for POST /workout/log"""

    kind: str = Field(..., min_length=1, description="Workout type label, e.g. Yoga or Lifting")
    duration_minutes: int = Field(..., gt=0)
    source: WorkoutSource = WorkoutSource.MANUAL
    calories: Optional[int] = Field(None, gt=0)


class BonusAwardRequest(BaseModel):
    """Request body for POST /bonus/award"""

    bonus_type: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    week_of: Optional[date] = None
    description: Optional[str] = None


class PresetBonusRequest(BaseModel):
    """Optional details for the fixed-amount bonus presets"""

    week_of: Optional[date] = None
    count: Optional[int] = Field(None, gt=0, description="Applications or problems completed")
    details: Optional[str] = Field(None, description="Book title or date details")


class GoodBoyBonusRequest(BaseModel):
    """Request body for POST /quick/good-boy-bonus"""

    amount: Decimal = Field(..., gt=0)
    reason: str = "Exceptional effort"


class BalanceUpdateRequest(BaseModel):
    """Request body for POST /balance/update"""

    account_a: Decimal
    account_b: Decimal
    checking: Decimal


class ReconciliationRunRequest(BaseModel):
    """Request body for POST /reconciliation/run"""

    uber_earnings: Decimal = Field(Decimal("0"), ge=0)


class UberEarningsRequest(BaseModel):
    """Request body for POST /reconciliation/uber-earnings"""

    amount: Decimal = Field(..., gt=0)
