import copy
import threading
from typing import Any, Dict, Optional, Tuple

from src.core.errors import RecordConflictError
from src.core.interfaces.trade_store import ITradeStore


class InMemoryTradeStore(ITradeStore):
    """Process-local store for development and tests. Not shared between workers."""

    backend_name = "memory"

    def __init__(self, table_name: str = "trading_log", partition_key: str = "PK", sort_key: str = "SK"):
        super().__init__(table_name, partition_key, sort_key)
        self._items: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def put_if_absent(self, item: Dict[str, Any]) -> None:
        key = self.key_of(item)
        with self._lock:
            if key in self._items:
                raise RecordConflictError(*key)
            self._items[key] = copy.deepcopy(item)

    def get(self, partition_value: str, sort_value: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            item = self._items.get((partition_value, sort_value))
            return copy.deepcopy(item) if item is not None else None

    def __len__(self):
        return len(self._items)
