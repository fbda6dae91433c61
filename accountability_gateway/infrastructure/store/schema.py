"""Field names of the hosted collections, verbatim (including whitespace quirks)"""

from dataclasses import dataclass

TITLE = "Name"


@dataclass(frozen=True)
class CardioFields:
    date_assigned: str = "Date Assigned"
    kind: str = "Type"
    minutes: str = "Minutes Required"
    date_completed: str = "Date Completed"
    status: str = "Status"


@dataclass(frozen=True)
class DebtFields:
    # Trailing space matches the live schema; do not "fix"
    date_assigned: str = "Date Assigned "
    original_amount: str = "Original Amount"
    current_amount: str = "Current Amount"
    interest_rate: str = "Interest Rate"
    status: str = "Status"


@dataclass(frozen=True)
class WorkoutFields:
    date: str = "Date"
    kind: str = "Workout Type"
    duration: str = "Duration"
    calories: str = "Calories"
    source: str = "Source"


@dataclass(frozen=True)
class BonusFields:
    week_of: str = "Week Of"
    bonus_type: str = "Bonus Type"
    amount: str = "Amount Earned"
    status: str = "Status"


@dataclass(frozen=True)
class BalanceFields:
    date: str = "Date"
    account_a: str = "Account A Balance"
    account_b: str = "Account B Balance"
    checking: str = "Checking Balance"


CARDIO = CardioFields()
DEBT = DebtFields()
WORKOUT = WorkoutFields()
BONUS = BonusFields()
BALANCE = BalanceFields()
