import sys
import os

# Add project root to path
sys.path.append(os.getcwd())

try:
    from src.config import get_settings
    from src.core.entities.trade import TradeRecord, ValidationFailure
    from src.core.services import TradeLogService
    from src.infrastructure.persistence.factory import build_store
    from src.infrastructure.persistence.memory_store import InMemoryTradeStore
    from src.api.main import app
    print("✅ All imports successful.")
except Exception as e:
    print(f"❌ Import failed: {e}")
    sys.exit(1)


def check_store():
    settings = get_settings()
    try:
        store = build_store(settings)
        print(f"✅ Store configured: {store.backend_name} (table '{settings.table_name}', "
              f"keys {settings.partition_key}/{settings.sort_key})")
    except Exception as e:
        print(f"❌ Store configuration failed: {e}")


# Validate + write against a scratch in-memory store, never the configured one
def check_ingest():
    settings = get_settings()
    store = InMemoryTradeStore(settings.table_name, settings.partition_key, settings.sort_key)
    service = TradeLogService(settings, store)
    body = {"acctId": "diag", "sortKey": "diag#1", "symbol": "aapl", "direction": "SHORT",
            "qty": 1, "entryPrice": 1, "status": "OPEN", "openedAt": "2024-01-01"}

    first = service.log_trade(body)
    second = service.log_trade(body)
    missing = service.log_trade({})

    if (first.status_code, second.status_code, missing.status_code) == (200, 409, 400):
        print("✅ Ingest path basic test passed (200, 409, 400).")
    else:
        print(f"❌ Ingest path failed: got {first.status_code}, {second.status_code}, {missing.status_code}")


if __name__ == "__main__":
    check_store()
    check_ingest()
