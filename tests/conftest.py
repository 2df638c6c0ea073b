"""Shared test configuration and fixtures.

Invariants:
    - Settings come from the environment set here, before app modules import
    - Every test gets a fresh in-memory SQLite database
    - Every route test gets a fresh IntelligenceProxy with a fake clock and a
      scripted upstream client, so caches never leak between tests
"""
import os

# Must run before app.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("INTELLIGENCE_ENABLED", "true")
os.environ.setdefault("ENVIRONMENT", "staging")

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.v1.intelligence import get_intelligence_proxy
from app.config import get_settings
from app.core.errors import IntelligenceClientError
from app.database import Base, get_db
from app.main import app
from app.models import Holding, Portfolio, User
from app.services.intelligence.proxy import IntelligenceProxy


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeIntelligenceClient:
    """Scripted stand-in for IntelligenceClient.

    `responses[method]` is a value to return or an exception to raise;
    `calls` records (method, args) for every call.
    """

    def __init__(self):
        self.responses = {}
        self.calls = []
        self.healthy = True

    async def _respond(self, method, *args):
        self.calls.append((method, args))
        result = self.responses.get(
            method, IntelligenceClientError("Intelligence API unreachable", 503),
        )
        if isinstance(result, Exception):
            raise result
        return result

    async def fetch_dashboard(self, holdings, include=None):
        return await self._respond("fetch_dashboard", holdings)

    async def fetch_signal_aggregation(self, holdings, days=7):
        return await self._respond("fetch_signal_aggregation", holdings, days)

    async def fetch_articles(self, ticker=None, limit=None, offset=None):
        return await self._respond("fetch_articles", ticker, limit, offset)

    async def fetch_article_full(self, article_id, portfolio_header):
        return await self._respond("fetch_article_full", article_id, portfolio_header)

    async def check_health(self):
        return self.healthy

    def count(self, method: str) -> int:
        return sum(1 for m, _ in self.calls if m == method)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_client():
    return FakeIntelligenceClient()


@pytest.fixture
def make_proxy(fake_client, clock):
    """Build a proxy with the integration enabled or disabled."""
    def _make(enabled: bool = True) -> IntelligenceProxy:
        settings = get_settings().model_copy(update={"intelligence_enabled": enabled})
        return IntelligenceProxy(client=fake_client, settings=settings, clock=clock)
    return _make


@pytest.fixture
def proxy(make_proxy):
    return make_proxy(enabled=True)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def user(test_db):
    user = User(auth_subject="user_123", email="investor@example.com")
    test_db.add(user)
    await test_db.commit()
    return user


@pytest.fixture
async def portfolio(test_db, user):
    portfolio = Portfolio(user_id=user.id, name="Core", is_active=True)
    test_db.add(portfolio)
    await test_db.flush()
    test_db.add_all([
        Holding(portfolio_id=portfolio.id, symbol="MSFT", quantity=Decimal("5"),
                average_price=Decimal("280"), current_price=Decimal("300")),
        Holding(portfolio_id=portfolio.id, symbol="AAPL", quantity=Decimal("10"),
                average_price=Decimal("150"), current_price=None),
    ])
    await test_db.commit()
    return portfolio


@pytest.fixture
def auth_headers():
    settings = get_settings()
    token = jwt.encode({"sub": "user_123"}, settings.secret_key, algorithm=settings.algorithm)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(test_session_factory, proxy):
    """API client with the test DB and a fresh proxy."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_intelligence_proxy] = lambda: proxy

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
