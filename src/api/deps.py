from functools import lru_cache

from src.config import get_settings
from src.core.services import TradeLogService
from src.infrastructure.persistence.factory import build_store


@lru_cache
def get_trade_log_service() -> TradeLogService:
    """One service (and store client) per process, built from the environment at first use."""
    settings = get_settings()
    return TradeLogService(settings, build_store(settings))
