"""Tests for the proxy-event entry point."""
import base64
import json

import pytest

from src.api.lambda_handler import handle_event, resolve_method


@pytest.mark.parametrize("event, expected", [
    ({"httpMethod": "post"}, "POST"),
    ({"requestContext": {"http": {"method": "OPTIONS"}}}, "OPTIONS"),
    ({"body": "{}"}, "POST"),
    ({}, "GET"),
    ({"httpMethod": "DELETE", "requestContext": {"http": {"method": "GET"}}}, "DELETE"),
])
def test_resolve_method(event, expected):
    assert resolve_method(event) == expected


def test_post_event_logs_trade(service, store, trade_payload):
    resp = handle_event({"httpMethod": "POST", "body": json.dumps(trade_payload)}, service)
    assert resp["statusCode"] == 200
    assert json.loads(resp["body"]) == {"ok": True, "tradeId": ""}
    assert resp["headers"] == service.cors_headers()
    assert store.get("u1", "t1")["symbol"] == "AAPL"


def test_repeat_event_conflicts(service, trade_payload):
    event = {"body": json.dumps(trade_payload)}
    assert handle_event(event, service)["statusCode"] == 200
    second = handle_event(event, service)
    assert second["statusCode"] == 409
    assert json.loads(second["body"])["error"] == "RecordAlreadyExists"


def test_base64_body_decoded(service, store, trade_payload):
    encoded = base64.b64encode(json.dumps(trade_payload).encode()).decode()
    resp = handle_event({"httpMethod": "POST", "body": encoded, "isBase64Encoded": True}, service)
    assert resp["statusCode"] == 200
    assert len(store) == 1


def test_bad_base64_is_invalid_json(service, store):
    resp = handle_event({"httpMethod": "POST", "body": "***", "isBase64Encoded": True}, service)
    assert resp["statusCode"] == 400
    assert json.loads(resp["body"]) == {"error": "Invalid JSON"}
    assert len(store) == 0


def test_malformed_json_event(service):
    resp = handle_event({"httpMethod": "POST", "body": "{oops"}, service)
    assert resp["statusCode"] == 400
    assert json.loads(resp["body"]) == {"error": "Invalid JSON"}


def test_canned_responses(service):
    assert handle_event({"httpMethod": "OPTIONS"}, service) == {
        "statusCode": 204, "headers": service.cors_headers(), "body": ""
    }
    info = handle_event(None, service)
    assert info["statusCode"] == 200
    assert json.loads(info["body"])["message"] == "POST a trade."
    assert handle_event({"httpMethod": "PUT"}, service)["statusCode"] == 405


def test_deeply_nested_body_is_invalid_json(service, store):
    resp = handle_event({"httpMethod": "POST", "body": "[" * 100000 + "]" * 100000}, service)
    assert resp["statusCode"] == 400
    assert json.loads(resp["body"]) == {"error": "Invalid JSON"}
    assert len(store) == 0


def test_nan_literal_is_invalid_json(service, store):
    resp = handle_event({"httpMethod": "POST", "body": '{"PK": "u1", "qty": NaN}'}, service)
    assert resp["statusCode"] == 400
    assert json.loads(resp["body"]) == {"error": "Invalid JSON"}


@pytest.mark.parametrize("method", ["TRACE", "HEAD", "CONNECT"])
def test_other_methods_not_allowed(service, method):
    resp = handle_event({"httpMethod": method}, service)
    assert resp["statusCode"] == 405
    assert json.loads(resp["body"]) == {"error": "Method Not Allowed"}
    assert resp["headers"] == service.cors_headers()
