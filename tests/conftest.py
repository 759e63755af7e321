"""
Pytest configuration and shared fixtures.
"""
import pytest
from httpx import AsyncClient, ASGITransport

from src.api.deps import get_trade_log_service
from src.api.main import app
from src.config import Settings
from src.core.services import TradeLogService
from src.infrastructure.persistence.memory_store import InMemoryTradeStore

ALLOWED_ORIGIN = "https://journal.example.com"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        table_name="trading_log_test",
        partition_key="PK",
        sort_key="SK",
        allowed_origins=ALLOWED_ORIGIN,
        store_backend="memory",
        redis_url=None,
        database_url=None,
    )


@pytest.fixture
def store(settings: Settings) -> InMemoryTradeStore:
    return InMemoryTradeStore(settings.table_name, settings.partition_key, settings.sort_key)


@pytest.fixture
def service(settings: Settings, store: InMemoryTradeStore) -> TradeLogService:
    return TradeLogService(settings, store)


@pytest.fixture
async def client(service: TradeLogService):
    """Async HTTP client for the FastAPI app, wired to an in-memory store."""
    app.dependency_overrides[get_trade_log_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def trade_payload() -> dict:
    return {
        "acctId": "u1",
        "sortKey": "t1",
        "symbol": "aapl",
        "direction": "SHORT",
        "qty": 10,
        "entryPrice": 150,
        "status": "OPEN",
        "openedAt": "2024-01-01",
    }
