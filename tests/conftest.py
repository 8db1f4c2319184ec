from __future__ import annotations

from typing import Dict, List

import pytest
from fastapi.testclient import TestClient

from currency_lens.core.config import Settings
from currency_lens.db.dal import Database
from currency_lens.main import create_app
from currency_lens.services.rates.base import RateSource, RawQuote
from currency_lens.services.rates.cache_service import RateCache

# 1 JPY = X foreign units
SAMPLE_QUOTE: Dict[str, float] = {
    "USD": 0.008,  # 125 JPY
    "EUR": 0.00625,  # 160 JPY
    "GBP": 0.005,  # 200 JPY
    "CHF": 0.005882352941176471,  # 170 JPY
    "MYR": 0.03125,  # 32 JPY
}


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRateSource(RateSource):
    name = "fake"

    def __init__(self, rates: Dict[str, float] | None = None, date: str = "2024-01-01"):
        self.rates = dict(SAMPLE_QUOTE if rates is None else rates)
        self.date = date
        self.calls = 0
        self.fail_with: Exception | None = None
        self.gate = None  # optional asyncio.Event awaited before answering

    async def fetch_latest(self) -> RawQuote:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        return RawQuote(base="JPY", date=self.date, rates=dict(self.rates))


class MemoryStore:
    """In-memory persisted tier."""

    def __init__(self):
        self.record = None
        self.saves: List[dict] = []

    def load_cached_rates(self):
        return self.record

    def save_cached_rates(self, record):
        self.record = record
        self.saves.append(record)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def source() -> FakeRateSource:
    return FakeRateSource()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cache(source, store, clock) -> RateCache:
    return RateCache(source, store, ttl_seconds=3600, clock=clock)


@pytest.fixture
def db(tmp_path) -> Database:
    database = Database(tmp_path / "test.sqlite3")
    database.initialize()
    return database


@pytest.fixture
def app_settings(tmp_path) -> Settings:
    return Settings(
        db_path=tmp_path / "app.sqlite3",
        rate_source="static",
        debug=False,
        _env_file=None,
    )


@pytest.fixture
def app(app_settings, source):
    application = create_app(settings_override=app_settings)
    application.state.rate_cache = RateCache(
        source, application.state.db, ttl_seconds=3600
    )
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
