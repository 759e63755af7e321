from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class Direction(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"


class TradeStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class TradeRecord(BaseModel):
    """
    Canonical trade-log record produced by the validator.
    The composite key is stored under the configured attribute names (see to_item).
    """
    partitionKey: str
    sortKey: str
    tradeId: str = ""
    symbol: str
    direction: Direction = Direction.LONG
    qty: float
    entryPrice: float
    exitPrice: float = 0.0
    status: TradeStatus = TradeStatus.OPEN
    strategy: Optional[Any] = None
    openedAt: str
    closedAt: Optional[Any] = None
    notes: Optional[Any] = None

    class Config:
        json_schema_extra = {
            "example": {
                "partitionKey": "u1",
                "sortKey": "t1",
                "tradeId": "",
                "symbol": "AAPL",
                "direction": "SHORT",
                "qty": 10,
                "entryPrice": 150,
                "exitPrice": 0,
                "status": "OPEN",
                "openedAt": "2024-01-01",
            }
        }

    def to_item(self, partition_key: str, sort_key: str) -> Dict[str, Any]:
        """Flatten into the stored item, keyed by the configured attribute names."""
        item = self.model_dump(mode="json", exclude={"partitionKey", "sortKey"})
        # json mode renders NaN as null, keep the raw floats
        item["qty"] = self.qty
        item["entryPrice"] = self.entryPrice
        item["exitPrice"] = self.exitPrice
        return {partition_key: self.partitionKey, sort_key: self.sortKey, **item}


class ValidationFailure(BaseModel):
    """Every field that kept a payload from becoming a TradeRecord."""
    missing: List[str] = []
    invalid: List[str] = []


# --- Response Models ---

class TradeLoggedResponse(BaseModel):
    ok: bool = True
    tradeId: str


class MissingFieldsResponse(BaseModel):
    error: str = "Missing fields"
    missing: List[str]


class InvalidFieldsResponse(BaseModel):
    error: str = "Invalid fields"
    invalid: List[str]


class ErrorResponse(BaseModel):
    error: str
    message: Optional[str] = None
