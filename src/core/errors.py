"""
Storage error taxonomy.

Store adapters translate backend-specific exceptions into these classes so the
service can map them to responses without knowing which backend is in use.
"""

CONFLICT = "RecordAlreadyExists"
SERVER_ERROR = "ServerError"


class TradeStoreError(Exception):
    def __init__(self, classification: str, message: str):
        super().__init__(message)
        self.classification = classification or SERVER_ERROR
        self.message = message


class RecordConflictError(TradeStoreError):
    """A record already exists at the composite key."""

    def __init__(self, partition_value: str, sort_value: str):
        super().__init__(
            CONFLICT,
            f"A trade is already logged for key ({partition_value}, {sort_value})",
        )
        self.partition_value = partition_value
        self.sort_value = sort_value


class StoreBackendError(TradeStoreError):
    """Any other store fault: connectivity, timeouts, permissions, bad statements."""

    @classmethod
    def from_exception(cls, exc: BaseException) -> "StoreBackendError":
        return cls(type(exc).__name__, str(exc))
