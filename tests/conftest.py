"""Pytest fixtures for testing"""

import copy
import itertools
import json
import random
from datetime import date
from typing import Dict, Generator, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from accountability_gateway.api.dependencies import (
    get_clock,
    get_collection_ids,
    get_notifier,
    get_store,
)
from accountability_gateway.api.main import create_app
from accountability_gateway.bootstrap import AccountabilityServices, build_services
from accountability_gateway.config import CollectionIds
from accountability_gateway.domain.exceptions import RecordNotFoundError
from accountability_gateway.infrastructure.clients.discord import DiscordNotifier
from accountability_gateway.infrastructure.database.models import Base
from accountability_gateway.infrastructure.database.session import get_db
from accountability_gateway.infrastructure.store.base import Filter, Properties, Record, RecordStore, Sort
from accountability_gateway.infrastructure.store.properties import title_value
from accountability_gateway.infrastructure.store.schema import TITLE

# Wednesday; the surrounding week runs Sunday 2024-03-10 .. Saturday 2024-03-16
TODAY = date(2024, 3, 13)

COLLECTIONS = CollectionIds(
    cardio="cardio-db",
    debt="debt-db",
    workouts="workouts-db",
    bonuses="bonuses-db",
    balances="balances-db",
)

# Test database
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class MutableClock:
    """Clock whose date tests can move"""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today


class InMemoryRecordStore(RecordStore):
    """
    Record store fake that evaluates the same filter and sort documents the
    hosted database receives.
    """

    def __init__(self):
        self.records: Dict[str, Record] = {}
        self.collection_of: Dict[str, str] = {}
        self.calls: List[Tuple[str, str]] = []
        self.failures: Dict[Tuple[str, str], Exception] = {}
        self._ids = itertools.count(1)

    def fail(self, operation: str, collection_id: str, error: Exception) -> None:
        """Make the next ``operation`` on ``collection_id`` raise ``error``"""
        self.failures[(operation, collection_id)] = error

    def _check_failure(self, operation: str, collection_id: str) -> None:
        error = self.failures.pop((operation, collection_id), None)
        if error is not None:
            raise error

    def in_collection(self, collection_id: str) -> List[Record]:
        return [r for rid, r in self.records.items() if self.collection_of[rid] == collection_id]

    async def create(self, collection_id: str, properties: Properties, title: Optional[str] = None) -> Record:
        self.calls.append(("create", collection_id))
        self._check_failure("create", collection_id)

        record_id = f"rec-{next(self._ids)}"
        stored = copy.deepcopy(properties)
        if title:
            stored[TITLE] = title_value(title)
        self.records[record_id] = {"id": record_id, "properties": stored}
        self.collection_of[record_id] = collection_id
        return copy.deepcopy(self.records[record_id])

    async def update(self, record_id: str, properties: Properties) -> Record:
        if record_id not in self.records:
            raise RecordNotFoundError(f"Record not found: {record_id}")
        collection_id = self.collection_of[record_id]
        self.calls.append(("update", collection_id))
        self._check_failure("update", collection_id)

        self.records[record_id]["properties"].update(copy.deepcopy(properties))
        return copy.deepcopy(self.records[record_id])

    async def query(
        self,
        collection_id: str,
        filter: Optional[Filter] = None,
        sorts: Optional[List[Sort]] = None,
    ) -> List[Record]:
        self.calls.append(("query", collection_id))
        self._check_failure("query", collection_id)

        results = [r for r in self.in_collection(collection_id) if _matches(r, filter)]
        for sort in reversed(sorts or []):
            results.sort(
                key=lambda r: _sort_key(r, sort["property"]),
                reverse=sort["direction"] == "descending",
            )
            # Empty values go last in either direction
            results.sort(key=lambda r: _sort_key(r, sort["property"]) == "")
        return copy.deepcopy(results)

    async def get(self, record_id: str) -> Record:
        if record_id not in self.records:
            raise RecordNotFoundError(f"Record not found: {record_id}")
        return copy.deepcopy(self.records[record_id])


def _matches(record: Record, filter: Optional[Filter]) -> bool:
    if not filter:
        return True
    if "and" in filter:
        return all(_matches(record, f) for f in filter["and"])

    value = record["properties"].get(filter["property"]) or {}
    if "select" in filter:
        selected = value.get("select") or {}
        return selected.get("name") == filter["select"]["equals"]
    if "date" in filter:
        start = (value.get("date") or {}).get("start")
        if not start:
            return False
        day = start[:10]
        (operator, target), = filter["date"].items()
        return {
            "equals": day == target,
            "before": day < target,
            "on_or_after": day >= target,
            "on_or_before": day <= target,
        }[operator]
    raise ValueError(f"Unsupported filter: {filter}")


def _sort_key(record: Record, prop: str):
    value = record["properties"].get(prop) or {}
    if "date" in value:
        return (value["date"] or {}).get("start") or ""
    if "number" in value:
        return value["number"] or 0
    return ""


@pytest.fixture
def collections() -> CollectionIds:
    return COLLECTIONS


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock(TODAY)


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def services(store: InMemoryRecordStore, clock: MutableClock) -> AccountabilityServices:
    """Services without the run ledger"""
    return build_services(COLLECTIONS, store, clock)


@pytest.fixture
def ledger_services(store: InMemoryRecordStore, clock: MutableClock, db: Session) -> AccountabilityServices:
    """Services with the run ledger attached"""
    return build_services(COLLECTIONS, store, clock, db)


@pytest.fixture
def sent_messages() -> List[str]:
    """Contents posted to the webhook during a test"""
    return []


@pytest.fixture
def notifier(sent_messages: List[str]) -> DiscordNotifier:
    """Notifier posting to a mock webhook that records each message"""

    def handler(request: httpx.Request) -> httpx.Response:
        sent_messages.append(json.loads(request.content)["content"])
        return httpx.Response(204)

    return DiscordNotifier(
        webhook_url="https://discord.test/api/webhooks/1/token",
        rng=random.Random(0),
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def client(db: Session, store: InMemoryRecordStore, clock: MutableClock, notifier: DiscordNotifier) -> TestClient:
    """Create FastAPI test client with the fake store and test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_collection_ids] = lambda: COLLECTIONS
    app.dependency_overrides[get_notifier] = lambda: notifier
    return TestClient(app)
