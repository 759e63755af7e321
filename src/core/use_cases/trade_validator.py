import math
import re
from typing import Any, List, Mapping, Optional, Union

from src.core.entities.trade import Direction, TradeRecord, TradeStatus, ValidationFailure

DEFAULT_PARTITION_FIELD = "PK"
DEFAULT_SORT_FIELD = "SK"
PARTITION_ALIAS = "acctId"
SORT_ALIAS = "sortKey"

REQUIRED_FIELDS = ["symbol", "direction", "qty", "entryPrice", "status", "openedAt"]
NUMERIC_FIELDS = ["qty", "entryPrice", "exitPrice"]

# Numeric string grammar: no "_" separators, no "inf"/"nan" spellings
_DECIMAL_NUMBER = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_RADIX_NUMBER = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+")
_INFINITIES = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}


def is_missing(value: Any) -> bool:
    # 0 and False count as present
    return value is None or (isinstance(value, str) and value == "")


def to_text(value: Any) -> str:
    """Stringify a decoded JSON value the way JSON writes it (true, 10, 1.5)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_number(value: Any) -> float:
    """Lenient numeric coercion. Unparsable input becomes NaN rather than an error."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, float):
        return value
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if text in _INFINITIES:
            return _INFINITIES[text]
        if _RADIX_NUMBER.fullmatch(text):
            try:
                return float(int(text, 0))
            except OverflowError:
                return math.inf
        if _DECIMAL_NUMBER.fullmatch(text):
            return float(text)
        return math.nan
    return math.nan


class TradeValidator:
    """
    Turns an untrusted decoded JSON body into either a canonical TradeRecord
    or a ValidationFailure naming every problem at once.
    """

    def __init__(self, partition_key: str = DEFAULT_PARTITION_FIELD, sort_key: str = DEFAULT_SORT_FIELD,
                 strict_numbers: bool = False):
        self.partition_key = partition_key
        self.sort_key = sort_key
        self.strict_numbers = strict_numbers

    def resolve_keys(self, body: Mapping[str, Any]):
        pk_val = self._first_truthy(body, [DEFAULT_PARTITION_FIELD, self.partition_key, PARTITION_ALIAS])
        sk_val = self._first_truthy(body, [DEFAULT_SORT_FIELD, self.sort_key, SORT_ALIAS])
        return pk_val, sk_val

    def validate(self, body: Any) -> Union[TradeRecord, ValidationFailure]:
        if not isinstance(body, Mapping):
            body = {}

        pk_val, sk_val = self.resolve_keys(body)

        missing: List[str] = []
        if pk_val is None:
            missing.append(self.partition_key)
        if sk_val is None:
            missing.append(self.sort_key)
        for field in REQUIRED_FIELDS:
            if is_missing(body.get(field)):
                missing.append(field)
        if missing:
            return ValidationFailure(missing=missing)

        numbers = {field: to_number(body.get(field)) for field in NUMERIC_FIELDS}
        if self.strict_numbers:
            invalid = [f for f in NUMERIC_FIELDS if not math.isfinite(numbers[f])]
            if invalid:
                return ValidationFailure(invalid=invalid)

        return TradeRecord(
            partitionKey=to_text(pk_val),
            sortKey=to_text(sk_val),
            tradeId=to_text(body["tradeId"]) if body.get("tradeId") else "",
            symbol=to_text(body["symbol"]).upper(),
            direction=Direction.SHORT if body["direction"] == "SHORT" else Direction.LONG,
            qty=numbers["qty"],
            entryPrice=numbers["entryPrice"],
            exitPrice=numbers["exitPrice"],
            status=TradeStatus.CLOSED if body["status"] == "CLOSED" else TradeStatus.OPEN,
            strategy=body.get("strategy"),
            openedAt=to_text(body["openedAt"]),
            closedAt=body.get("closedAt"),
            notes=body.get("notes"),
        )

    @staticmethod
    def _first_truthy(body: Mapping[str, Any], names: List[str]) -> Optional[Any]:
        # Key fields are expected to be scalars; an empty list or object counts as absent
        for name in names:
            value = body.get(name)
            if value:
                return value
        return None
