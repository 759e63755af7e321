import logging

from src.core.entities.trade import TradeRecord
from src.core.errors import RecordConflictError, StoreBackendError
from src.core.interfaces.trade_store import ITradeStore

logger = logging.getLogger(__name__)


class IdempotentWriter:
    """
    Persists one canonical record with insert-if-absent semantics.
    First writer wins; no retries are attempted here.
    """

    def __init__(self, store: ITradeStore):
        self.store = store

    def write(self, record: TradeRecord) -> str:
        item = record.to_item(self.store.partition_key, self.store.sort_key)
        try:
            self.store.put_if_absent(item)
        except RecordConflictError:
            logger.info(f"Duplicate trade rejected for ({record.partitionKey}, {record.sortKey})")
            raise
        except StoreBackendError as e:
            logger.error(f"Store write failed for ({record.partitionKey}, {record.sortKey}): "
                         f"{e.classification}: {e.message}")
            raise

        logger.info(f"Logged trade ({record.partitionKey}, {record.sortKey}) tradeId={record.tradeId!r}")
        return record.tradeId
