# tests/conftest.py
"""
Fixtures and test setup for the Pytest suite.
"""

import os

# Set test environment variables BEFORE any application code is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"
os.environ["API_KEY"] = "test_api_key"

import httpx
import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from btcproxy.infrastructure.db.base import build_engine
from btcproxy.infrastructure.db.models import Base
from btcproxy.infrastructure.db.repository import HistoricalPriceStore
from btcproxy.infrastructure.pricing.coingecko_client import CoinGeckoClient


SIMPLE_PRICE_BODY = {
    "bitcoin": {
        "usd": 65000, "usd_24h_change": 1.5, "usd_market_cap": 1.28e12,
        "aud": 98000, "aud_24h_change": 1.4, "aud_market_cap": 1.93e12,
        "gbp": 51000, "gbp_24h_change": 1.3, "gbp_market_cap": 1.01e12,
        "eur": 60000, "eur_24h_change": 1.2, "eur_market_cap": 1.18e12,
        "cad": 88000, "cad_24h_change": 1.1, "cad_market_cap": 1.74e12,
    }
}

HISTORY_BODY = {"market_data": {"current_price": {"usd": 65000, "eur": 60000}}}


class FakeClock:
    """Manually advanced replacement for time.time()."""

    def __init__(self, start: float = 1_747_612_800.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUpstream:
    """
    Stand-in for the CoinGecko API behind an httpx.MockTransport.
    Responses are keyed by URL path; every request is recorded.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, httpx.Response] = {
            "/api/v3/simple/price": httpx.Response(200, json=SIMPLE_PRICE_BODY),
            "/api/v3/coins/bitcoin/history": httpx.Response(200, json=HISTORY_BODY),
        }
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.responses[request.url.path]

    def calls(self, path_suffix: str) -> int:
        return sum(1 for r in self.requests if r.url.path.endswith(path_suffix))

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def client(upstream: FakeUpstream) -> CoinGeckoClient:
    return CoinGeckoClient(api_key="test_api_key", timeout=10.0, transport=upstream.transport)


@pytest.fixture
def session_factory():
    """A fresh in-memory database per test."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def store(session_factory) -> HistoricalPriceStore:
    return HistoricalPriceStore(session_factory)
