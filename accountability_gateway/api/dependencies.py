"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from accountability_gateway.bootstrap import AccountabilityServices, build_notifier, build_services, build_store
from accountability_gateway.config import CollectionIds, settings
from accountability_gateway.infrastructure.clients.discord import DiscordNotifier
from accountability_gateway.infrastructure.database.session import get_db
from accountability_gateway.infrastructure.store.base import RecordStore
from accountability_gateway.utils.date_utils import Clock, make_clock


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


@lru_cache
def get_store() -> RecordStore:
    """Provide the shared record store adapter"""
    return build_store(settings)


def get_collection_ids() -> CollectionIds:
    return settings.collection_ids()


def get_clock() -> Clock:
    return make_clock(settings.timezone)


@lru_cache
def get_notifier() -> DiscordNotifier:
    """Provide the webhook notifier instance"""
    return build_notifier(settings)


def get_services(
    collections: CollectionIds = Depends(get_collection_ids),
    store: RecordStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    db: Session = Depends(get_db),
) -> AccountabilityServices:
    return build_services(
        collections,
        store,
        clock,
        db,
        yoga_kind=settings.yoga_workout_type,
        lifting_kind=settings.lifting_workout_type,
    )
