from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ITradeStore(ABC):
    """
    Key-value store for trade-log items, keyed by (partition attribute, sort attribute).
    Implementations raise RecordConflictError / StoreBackendError from src.core.errors.
    """

    backend_name: str = "unknown"

    def __init__(self, table_name: str, partition_key: str, sort_key: str):
        self.table_name = table_name
        self.partition_key = partition_key
        self.sort_key = sort_key

    @abstractmethod
    def put_if_absent(self, item: Dict[str, Any]) -> None:
        """
        Atomically insert item unless a record already exists at its composite key.
        Never overwrites.
        """
        pass

    @abstractmethod
    def get(self, partition_value: str, sort_value: str) -> Optional[Dict[str, Any]]:
        pass

    def key_of(self, item: Dict[str, Any]):
        return item[self.partition_key], item[self.sort_key]
