"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional


class CardioKind(str, Enum):
    TREADMILL = "treadmill"
    BIKE = "bike"
    RUN = "run"
    STAIRSTEPPER = "stairstepper"


class CardioStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    MISSED = "missed"


class DebtStatus(str, Enum):
    ACTIVE = "active"
    PAID = "paid"


class WorkoutSource(str, Enum):
    WATCH = "watch"
    MANUAL = "manual"


class BonusStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


@dataclass
class CardioAssignment:
    """Punishment cardio obligation"""

    id: str
    kind: str
    required_minutes: int
    date_assigned: date
    status: CardioStatus
    date_completed: Optional[date] = None
    name: str = ""


@dataclass
class Debt:
    """Monetary penalty compounding daily while active"""

    id: str
    original_amount: Decimal
    current_amount: Decimal
    daily_interest_rate: Decimal
    date_assigned: date
    status: DebtStatus
    name: str = ""


@dataclass
class WorkoutLog:
    """Logged training session, immutable once created"""

    id: str
    kind: str  # deployment label, e.g. "Yoga" | "Lifting" | "Cardio"
    duration_minutes: int
    source: str  # "watch" or "manual"
    date: date
    calories: Optional[int] = None
    name: str = ""


@dataclass
class Bonus:
    """Weekly reward awaiting payout"""

    id: str
    bonus_type: str
    amount: Decimal
    week_of: date
    status: BonusStatus
    name: str = ""


@dataclass
class BalanceSnapshot:
    """Point-in-time account balances (append-only)"""

    id: str
    date: date
    account_a: Decimal
    account_b: Decimal
    checking: Decimal
    available_transfer: Decimal = field(init=False)

    def __post_init__(self) -> None:
        # Derived, never stored: Account A is the transfer pool
        self.available_transfer = self.account_a


@dataclass
class CardioStats:
    window_days: int
    total: int
    completed: int
    pending: int
    missed: int
    total_minutes: int
    completed_minutes: int
    completion_rate: float  # percent, one decimal


@dataclass
class InterestCharge:
    debt_id: str
    old_amount: Decimal
    new_amount: Decimal
    interest_charged: Decimal


@dataclass
class PaymentResult:
    debt_id: str
    payment_amount: Decimal
    remaining_amount: Decimal
    status: DebtStatus
    fully_paid: bool
    remaining_payment: Decimal = Decimal("0")


@dataclass
class DebtTotal:
    total_debt: Decimal
    debt_count: int
    debts: List[Debt]


@dataclass
class DebtStats:
    window_days: int
    total_debts: int
    active_debts: int
    paid_debts: int
    total_original_amount: Decimal
    total_current_amount: Decimal
    total_interest_accrued: Decimal


@dataclass
class WeeklyEarnings:
    """Earnings policy applied to one Sunday-Saturday window"""

    week_start: date
    yoga_count: int
    lifting_count: int
    other_count: int
    lifting_earnings: Decimal
    extra_yoga_earnings: Decimal
    total_earnings: Decimal
    perfect_week_bonus: Decimal
    total_with_bonus: Decimal


@dataclass
class WorkoutEarning:
    workout: WorkoutLog
    earnings: Decimal


@dataclass
class DailyEarnings:
    day: date
    weekly_yoga_count: int
    lifting_earnings: Decimal
    extra_yoga_earnings: Decimal
    total_earnings: Decimal
    breakdown: List[WorkoutEarning]


@dataclass
class BaselineCompliance:
    required: int
    completed: int
    compliant: bool
    remaining: int
    message: str


@dataclass
class WorkoutStats:
    window_days: int
    total_workouts: int
    total_duration: int
    by_type: Dict[str, int]
    by_source: Dict[str, int]
    average_per_day: float
    average_duration: float


@dataclass
class BonusStats:
    window_days: int
    total_bonuses: int
    pending_bonuses: int
    paid_bonuses: int
    total_earned: Decimal
    total_pending: Decimal
    total_paid: Decimal
    by_type: Dict[str, Decimal]


@dataclass
class PendingBonusTotal:
    total_amount: Decimal
    bonus_count: int
    bonuses: List[Bonus]


@dataclass
class TransferCalculation:
    base_allowance: Decimal
    workout_earnings: Decimal
    bonus_earnings: Decimal
    uber_earnings: Decimal
    total_earnings: Decimal
    account_a_balance: Decimal
    max_transfer_allowed: Decimal
    can_transfer_full: bool


@dataclass
class RefillStatus:
    refill_needed: bool
    current_balance: Decimal
    threshold: Decimal
    suggested_refill: Decimal
    message: str


@dataclass
class BalanceSummary:
    balances: Optional[BalanceSnapshot]
    refill_needed: bool
    refill_amount: Decimal
    summary: str


@dataclass
class AccountUsage:
    window_days: int
    starting_balance: Decimal
    current_balance: Decimal
    total_used: Decimal
    average_daily_use: Decimal
    projected_monthly_use: Decimal


@dataclass
class UberEarningsDelta:
    earnings: Decimal
    current_balance: Decimal
    previous_balance: Optional[Decimal]


@dataclass
class OverdueSweepResult:
    overdue_count: int
    debts_created: List[Debt]
    cardio_marked_missed: List[CardioAssignment]
    replayed_intents: int = 0


@dataclass
class BonusCheckResult:
    is_end_of_week: bool
    week_start: Optional[date]
    weekly_earnings: Optional[WeeklyEarnings]
    bonuses_added: List[Bonus]
    total_bonuses: Decimal


@dataclass
class TransferApproval:
    calculation: TransferCalculation
    has_debt: bool
    debt_amount: Decimal
    uber_earnings_blocked: bool
    approved_transfers: List[str]


@dataclass
class ReconciliationResult:
    """Everything one nightly run produced, in pipeline order"""

    run_date: date
    overdue: OverdueSweepResult
    interest: List[InterestCharge]
    workout_earnings: DailyEarnings
    bonus_check: BonusCheckResult
    transfers: TransferApproval
    balance_summary: BalanceSummary
    summary: str = ""


@dataclass
class UberEarningsOutcome:
    action: str  # "debt_payment" or "earnings_unlock"
    amount: Decimal
    remaining_debt: Decimal
    total_remaining_debt: Decimal
    unapplied_payment: Decimal
    unlocked_amount: Decimal
    message: str
