import logging

from src.config import Settings
from src.core.interfaces.trade_store import ITradeStore
from src.infrastructure.persistence.memory_store import InMemoryTradeStore
from src.infrastructure.persistence.postgres_store import PostgresTradeStore
from src.infrastructure.persistence.redis_store import RedisTradeStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> ITradeStore:
    """
    Pick the trade store. "auto" prefers DATABASE_URL, then REDIS_URL,
    then falls back to the in-process store.
    """
    backend = settings.store_backend
    if backend == "auto":
        if settings.database_url:
            backend = "postgres"
        elif settings.redis_url:
            backend = "redis"
        else:
            backend = "memory"

    if backend == "postgres":
        if not settings.database_url:
            raise ValueError("STORE_BACKEND=postgres requires DATABASE_URL")
        logger.info(f"Using Postgres trade store, table '{settings.table_name}'.")
        return PostgresTradeStore(settings.database_url, settings.table_name,
                                  settings.partition_key, settings.sort_key)

    if backend == "redis":
        if not settings.redis_url:
            raise ValueError("STORE_BACKEND=redis requires REDIS_URL")
        logger.info(f"Using Redis trade store, prefix '{settings.table_name}'.")
        return RedisTradeStore(settings.redis_url, settings.table_name,
                               settings.partition_key, settings.sort_key)

    logger.warning("Using in-memory trade store. Trades are lost on restart.")
    return InMemoryTradeStore(settings.table_name, settings.partition_key, settings.sort_key)
