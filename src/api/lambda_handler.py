"""
API Gateway / Lambda Function URL entry point.

Same routing and response mapping as the FastAPI app, for deployments that
invoke a function with a proxy event instead of running an ASGI server.
"""
import base64
import binascii
import json
import logging
from typing import Any, Dict, Optional

from src.api.deps import get_trade_log_service
from src.core.services import ServiceResponse, TradeLogService

logger = logging.getLogger(__name__)


def resolve_method(event: Dict[str, Any]) -> str:
    """REST API events carry httpMethod, HTTP API v2 events requestContext.http.method."""
    method = event.get("httpMethod")
    if not method:
        method = ((event.get("requestContext") or {}).get("http") or {}).get("method")
    if not method:
        method = "POST" if event.get("body") else "GET"
    return method.upper()


def handle_event(event: Optional[Dict[str, Any]], service: TradeLogService) -> Dict[str, Any]:
    event = event or {}
    method = resolve_method(event)

    if method == "OPTIONS":
        result = service.preflight()
    elif method == "GET":
        result = service.info()
    elif method != "POST":
        result = service.method_not_allowed()
    else:
        result = _log_post(event, service)

    return to_proxy_response(result, service)


def _log_post(event: Dict[str, Any], service: TradeLogService) -> ServiceResponse:
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            logger.warning(f"Undecodable base64 body: {e}")
            return service.invalid_json()
    return service.log_raw(body)


def to_proxy_response(result: ServiceResponse, service: TradeLogService) -> Dict[str, Any]:
    return {
        "statusCode": result.status_code,
        "headers": service.cors_headers(),
        "body": json.dumps(result.body) if result.body is not None else "",
    }


def handler(event, context=None):
    return handle_event(event, get_trade_log_service())
