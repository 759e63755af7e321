import json
import logging
from typing import Any, Dict, Optional

import redis

from src.core.errors import RecordConflictError, StoreBackendError
from src.core.interfaces.trade_store import ITradeStore

logger = logging.getLogger(__name__)


class RedisTradeStore(ITradeStore):
    """
    One Redis string per trade, keyed "{table}:" + json.dumps([pk, sk]).
    SET NX gives the atomic insert-if-absent; existing keys are never touched.
    """

    backend_name = "redis"

    def __init__(self, redis_url: str, table_name: str, partition_key: str, sort_key: str,
                 client: Optional[redis.Redis] = None):
        super().__init__(table_name, partition_key, sort_key)
        self.redis_url = redis_url
        self.client = client if client is not None else redis.from_url(redis_url, decode_responses=True)
        logger.info(f"RedisTradeStore initialized. Table prefix: {table_name}")

    def record_key(self, partition_value: str, sort_value: str) -> str:
        # JSON-encoded pair so ":" inside a key part cannot collide with the separator
        return f"{self.table_name}:{json.dumps([partition_value, sort_value])}"

    def put_if_absent(self, item: Dict[str, Any]) -> None:
        pk_val, sk_val = self.key_of(item)
        try:
            created = self.client.set(self.record_key(pk_val, sk_val), json.dumps(item), nx=True)
        except redis.RedisError as e:
            raise StoreBackendError.from_exception(e) from e
        if not created:
            raise RecordConflictError(pk_val, sk_val)

    def get(self, partition_value: str, sort_value: str) -> Optional[Dict[str, Any]]:
        try:
            data = self.client.get(self.record_key(partition_value, sort_value))
        except redis.RedisError as e:
            raise StoreBackendError.from_exception(e) from e
        if data:
            return json.loads(data)
        return None
