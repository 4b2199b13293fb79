"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta
from typing import Callable, Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from spend_insights.api.main import create_app
from spend_insights.api.dependencies import get_insight_service
from spend_insights.domain.models import Transaction
from spend_insights.infrastructure.clients.providers import ProviderRegistry
from spend_insights.infrastructure.database.models import Base
from spend_insights.infrastructure.database.session import get_db
from spend_insights.services.insights import InsightService, RECURRING, COACH, FORECAST
from spend_insights.services.throttling import RateLimiter, ResultCache


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubProvider:
    """Stands in for a TextProviderClient; replies with canned text or raises"""

    def __init__(self, name: str = "gemini", reply: str = "", error: Optional[Exception] = None):
        self.name = name
        self.reply = reply
        self.error = error
        self.calls: List[dict] = []

    async def generate(self, prompt: str, system: str = "", temperature: float = 0.2) -> str:
        self.calls.append({"prompt": prompt, "system": system, "temperature": temperature})
        if self.error is not None:
            raise self.error
        return self.reply


class ListStore:
    """In-memory transaction source honouring the ``since`` bound"""

    def __init__(self, transactions: List[Transaction]):
        self.transactions = transactions
        self.calls = 0

    async def get_transactions(self, user_id: str, since: datetime) -> List[Transaction]:
        self.calls += 1
        return sorted((t for t in self.transactions if t.date >= since), key=lambda t: t.date)


def build_service(
    registry: ProviderRegistry | None = None,
    max_requests: int = 10,
    clock: FakeClock | None = None,
    now: Callable[[], datetime] = datetime.now,
) -> InsightService:
    """InsightService with fresh limiters and cache"""
    clock = clock or FakeClock()
    return InsightService(
        registry=registry or ProviderRegistry(),
        cache=ResultCache(max_entries=64, default_ttl=600, clock=clock),
        limiters={
            op: RateLimiter(max_requests=max_requests, window_seconds=3600, clock=clock)
            for op in (RECURRING, COACH, FORECAST)
        },
        cache_ttl=600,
        now=now,
    )


def txn(days_ago: int, amount: float, category: str, description: Optional[str] = None) -> Transaction:
    """Transaction dated ``days_ago`` days before now, at noon"""
    when = (datetime.now() - timedelta(days=days_ago)).replace(hour=12, minute=0, second=0, microsecond=0)
    return Transaction(date=when, amount=amount, category=category, description=description)


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
def insight_service() -> InsightService:
    return build_service()


@pytest.fixture
def client(db: Session, insight_service: InsightService) -> TestClient:
    """Create FastAPI test client with test database and a fresh insight service"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_insight_service] = lambda: insight_service
    return TestClient(app)


@pytest.fixture
def monthly_subscription() -> List[Transaction]:
    """Same merchant charged 60, 30 and 0 days ago"""
    return [
        txn(60, 50.0, "Subscriptions", "NETFLIX.COM 8842"),
        txn(30, 50.0, "Subscriptions", "NETFLIX.COM 9917"),
        txn(0, 50.0, "Subscriptions", "NETFLIX.COM 1203"),
    ]
