"""
Serverless-style entry point.

Accepts a raw gateway or scheduler event and returns ``{statusCode, headers,
body}``. Supported shapes, first match wins: ``pathParameters.symbol``,
``queryStringParameters.symbols``, a top-level ``symbols`` list, or nothing.
"""
from __future__ import annotations

import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from quote_gateway.container import Container, get_container
from quote_gateway.errors import MalformedTriggerError, QuoteGatewayError
from quote_gateway.schemas.responses import ErrorResponse
from quote_gateway.schemas.trigger import Trigger
from quote_gateway.utils.validators import utc_now_iso

logger = logging.getLogger(__name__)

SUCCESS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Allow-Methods": "GET,OPTIONS",
}
ERROR_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
}

_trigger_adapter = TypeAdapter(Trigger)


def _field(section: Any, name: str) -> Any:
    if isinstance(section, dict):
        return section.get(name)
    return None


def parse_event(event: dict[str, Any] | None) -> Trigger:
    event = event or {}
    path_symbol = _field(event.get("pathParameters"), "symbol")
    query_symbols = _field(event.get("queryStringParameters"), "symbols")

    if path_symbol is not None:
        raw = {"kind": "path", "symbol": path_symbol}
    elif query_symbols is not None:
        raw = {"kind": "delimited", "symbols": query_symbols}
    elif event.get("symbols") is not None:
        raw = {"kind": "list", "symbols": event["symbols"]}
    else:
        raw = {"kind": "default"}

    try:
        return _trigger_adapter.validate_python(raw)
    except ValidationError as exc:
        raise MalformedTriggerError(f"Malformed trigger: {exc.error_count()} invalid field(s)") from exc


def handle_event(event: dict[str, Any] | None, container: Container | None = None) -> dict[str, Any]:
    container = container or get_container()
    try:
        trigger = parse_event(event)
        response = container.gateway.fetch(trigger)
    except QuoteGatewayError as exc:
        return _error(str(exc))
    except Exception as exc:
        logger.error(f"Handler error: {exc}", exc_info=True)
        return _error(str(exc) or "Unknown error")

    return {"statusCode": 200, "headers": SUCCESS_HEADERS, "body": response.model_dump_json(by_alias=True)}


def _error(message: str) -> dict[str, Any]:
    payload = ErrorResponse(error=message, timestamp=utc_now_iso())
    return {"statusCode": 400, "headers": ERROR_HEADERS, "body": payload.model_dump_json()}
