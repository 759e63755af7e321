"""Application configuration via environment variables."""
from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Storage
    table_name: str = "trading_log"
    partition_key: str = "PK"
    sort_key: str = "SK"
    store_backend: Literal["auto", "memory", "redis", "postgres"] = "auto"
    redis_url: Optional[str] = None
    database_url: Optional[str] = None

    # HTTP
    allowed_origins: str = "*"

    # Validation: reject NaN qty/entryPrice/exitPrice instead of storing them
    strict_numbers: bool = False

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_ignore_empty": True, "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
