"""Composition root: wires the store, ledger and services from explicit configuration"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from accountability_gateway.config import CollectionIds, Settings
from accountability_gateway.infrastructure.clients.discord import DiscordNotifier
from accountability_gateway.infrastructure.database.repositories import (
    AccrualRepository,
    IntentRepository,
    RunRepository,
)
from accountability_gateway.infrastructure.store.base import RecordStore
from accountability_gateway.infrastructure.store.notion import NotionRecordStore
from accountability_gateway.services.balance import BalanceService
from accountability_gateway.services.bonus import BonusService
from accountability_gateway.services.cardio import CardioService
from accountability_gateway.services.debt import DebtService
from accountability_gateway.services.reconciliation import ReconciliationService
from accountability_gateway.services.workout import WorkoutService
from accountability_gateway.utils.date_utils import Clock


@dataclass
class AccountabilityServices:
    """The five domain services plus the engine built on top of them"""

    cardio: CardioService
    debt: DebtService
    workout: WorkoutService
    bonus: BonusService
    balance: BalanceService
    reconciliation: ReconciliationService


def build_store(config: Settings) -> RecordStore:
    """
    Raises:
        ConfigurationError: When no API key is configured
    """
    return NotionRecordStore(
        api_key=config.notion_api_key,
        base_url=config.notion_api_base,
        notion_version=config.notion_version,
        timeout=config.http_timeout_seconds,
    )


def build_notifier(config: Settings) -> DiscordNotifier:
    return DiscordNotifier(
        webhook_url=config.discord_webhook_url,
        username=config.notifier_username,
        max_retries=config.webhook_max_retries,
        backoff_base=config.webhook_backoff_base,
        timeout=config.http_timeout_seconds,
    )


def build_services(
    collections: CollectionIds,
    store: RecordStore,
    clock: Clock,
    db: Optional[Session] = None,
    yoga_kind: str = "Yoga",
    lifting_kind: str = "Lifting",
) -> AccountabilityServices:
    """
    Build every service against one store handle.

    With a ledger session, interest accrual is watermarked per day, the
    overdue sweep keeps an intent log, and runs are recorded.
    """
    accruals = AccrualRepository(db) if db is not None else None
    intents = IntentRepository(db) if db is not None else None
    runs = RunRepository(db) if db is not None else None

    cardio = CardioService(store, collections.cardio, clock)
    debt = DebtService(store, collections.debt, clock, accruals)
    workout = WorkoutService(store, collections.workouts, clock, yoga_kind, lifting_kind)
    bonus = BonusService(store, collections.bonuses, clock)
    balance = BalanceService(store, collections.balances, clock)

    reconciliation = ReconciliationService(
        cardio=cardio,
        debt=debt,
        workout=workout,
        bonus=bonus,
        balance=balance,
        clock=clock,
        intents=intents,
        runs=runs,
    )
    return AccountabilityServices(
        cardio=cardio,
        debt=debt,
        workout=workout,
        bonus=bonus,
        balance=balance,
        reconciliation=reconciliation,
    )
