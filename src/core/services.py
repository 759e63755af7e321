import json
import logging
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel

from src.config import Settings
from src.core.entities.trade import (
    ErrorResponse,
    InvalidFieldsResponse,
    MissingFieldsResponse,
    TradeLoggedResponse,
    ValidationFailure,
)
from src.core.errors import RecordConflictError, TradeStoreError
from src.core.interfaces.trade_store import ITradeStore
from src.core.use_cases.idempotent_writer import IdempotentWriter
from src.core.use_cases.trade_validator import TradeValidator

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


# --- Output Models ---
class ServiceResponse(BaseModel):
    status_code: int
    body: Optional[Dict[str, Any]] = None


# --- Business Logic Services ---

class TradeLogService:
    """
    Validate -> insert-if-absent -> response mapping for one trade-log POST.
    Stateless per call; uniqueness is enforced by the store's conditional write.
    """

    def __init__(self, settings: Settings, store: ITradeStore):
        self.settings = settings
        self.store = store
        self.validator = TradeValidator(
            partition_key=settings.partition_key,
            sort_key=settings.sort_key,
            strict_numbers=settings.strict_numbers,
        )
        self.writer = IdempotentWriter(store)

    def cors_headers(self) -> Dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.settings.allowed_origins,
            "Access-Control-Allow-Headers": "Content-Type",
            "Access-Control-Allow-Methods": "OPTIONS,POST",
            "Content-Type": "application/json; charset=utf-8",
        }

    # Canned responses for the non-POST methods
    def preflight(self) -> ServiceResponse:
        return ServiceResponse(status_code=204)

    def info(self) -> ServiceResponse:
        return ServiceResponse(status_code=200, body={"ok": True, "message": "POST a trade."})

    def method_not_allowed(self) -> ServiceResponse:
        return ServiceResponse(status_code=405, body=ErrorResponse(error="Method Not Allowed").model_dump(exclude_none=True))

    def invalid_json(self) -> ServiceResponse:
        return ServiceResponse(status_code=400, body=ErrorResponse(error="Invalid JSON").model_dump(exclude_none=True))

    def log_raw(self, raw: Union[str, bytes, None]) -> ServiceResponse:
        """Parse a JSON request body and log it. An empty body is treated as {}."""
        try:
            body = json.loads(raw or "{}", parse_constant=_reject_constant)
        except (ValueError, RecursionError):
            return self.invalid_json()
        return self.log_trade(body)

    def log_trade(self, body: Any) -> ServiceResponse:
        outcome = self.validator.validate(body)

        if isinstance(outcome, ValidationFailure):
            if outcome.missing:
                payload = MissingFieldsResponse(missing=outcome.missing)
            else:
                payload = InvalidFieldsResponse(invalid=outcome.invalid)
            logger.info(f"Rejected trade payload: {payload.error} {outcome.missing or outcome.invalid}")
            return ServiceResponse(status_code=400, body=payload.model_dump())

        try:
            trade_id = self.writer.write(outcome)
        except RecordConflictError as e:
            return ServiceResponse(status_code=409, body=ErrorResponse(error=e.classification, message=e.message).model_dump())
        except TradeStoreError as e:
            return ServiceResponse(status_code=500, body=ErrorResponse(error=e.classification, message=e.message).model_dump())

        return ServiceResponse(status_code=200, body=TradeLoggedResponse(tradeId=trade_id).model_dump())
