import asyncio
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

# --- Imports ---
from src.api.deps import get_trade_log_service
from src.config import get_settings
from src.core.services import ServiceResponse, TradeLogService

# Setup Logging
logging.basicConfig(level=get_settings().log_level.upper())
logger = logging.getLogger("TradeLog")

TRADES_PATH = "/v1/trades"

app = FastAPI(title="TradeLog Ingest API", version="1.0.0", description="Validated, insert-only trade-log ingestion")


def to_http(result: ServiceResponse, service: TradeLogService) -> Response:
    headers = service.cors_headers()
    if result.body is None:
        return Response(status_code=result.status_code, headers=headers)
    return JSONResponse(content=result.body, status_code=result.status_code, headers=headers)

# --- Endpoints ---

@app.get("/health")
async def health(service: TradeLogService = Depends(get_trade_log_service)):
    return {"status": "healthy", "store": service.store.backend_name}

@app.options(TRADES_PATH)
async def trades_preflight(service: TradeLogService = Depends(get_trade_log_service)):
    return to_http(service.preflight(), service)

@app.get(TRADES_PATH)
async def trades_info(service: TradeLogService = Depends(get_trade_log_service)):
    return to_http(service.info(), service)

@app.post(TRADES_PATH)
async def log_trade(request: Request, service: TradeLogService = Depends(get_trade_log_service)):
    """
    Log one trade. Accepts PK/SK (or the configured key names) or acctId/sortKey.
    The write is insert-only: a second POST for the same key returns 409.
    """
    raw = await request.body()
    # Store clients are blocking; keep them off the event loop
    result = await asyncio.to_thread(service.log_raw, raw)
    return to_http(result, service)

# Any method without a route on /v1/trades lands here as a 405 from the router
@app.exception_handler(StarletteHTTPException)
async def trades_method_not_allowed(request: Request, exc: StarletteHTTPException):
    if exc.status_code != 405 or request.url.path != TRADES_PATH:
        return await http_exception_handler(request, exc)
    provider = app.dependency_overrides.get(get_trade_log_service, get_trade_log_service)
    service = provider()
    logger.info(f"{request.method} {TRADES_PATH} rejected")
    return to_http(service.method_not_allowed(), service)
