from __future__ import annotations

import logging
import time
import uuid

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from quote_gateway.config.settings import settings
from quote_gateway.container import Container, get_container
from quote_gateway.errors import QuoteGatewayError
from quote_gateway.schemas.responses import ErrorResponse, MultiQuoteResponse, RefreshRequest, SingleQuoteResponse
from quote_gateway.schemas.trigger import DefaultTrigger, DelimitedListTrigger, ExplicitListTrigger, PathSymbolTrigger
from quote_gateway.utils.validators import utc_now_iso

logger = logging.getLogger(__name__)
router = APIRouter()

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


def error_response(message: str, status_code: int = 400) -> JSONResponse:
    payload = ErrorResponse(error=message, timestamp=utc_now_iso())
    return JSONResponse(payload.model_dump(), status_code=status_code, headers=CORS_HEADERS)


def _container(request: Request) -> Container:
    return request.app.state.container


def create_app(container: Container | None = None) -> FastAPI:
    app = FastAPI(title=settings.app_name, version=settings.app_version)
    app.state.container = container or get_container()

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        response = None
        start = time.perf_counter()
        try:
            response = await call_next(request)
            return response
        finally:
            latency_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.info(
                "request_complete",
                extra={
                    "request_id": request_id,
                    "path": request.url.path,
                    "status_code": response.status_code if response else None,
                    "latency_ms": latency_ms,
                },
            )

    @app.exception_handler(QuoteGatewayError)
    async def gateway_error_handler(_: Request, exc: QuoteGatewayError):
        return error_response(str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError):
        return error_response(f"Invalid request: {exc.errors()}")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_: Request, exc: Exception):
        logger.error(f"Unhandled API exception: {exc}", exc_info=True)
        return error_response(str(exc) or "Unknown error")

    app.include_router(router)
    return app


@router.get("/health")
def health():
    return {"status": "ok", "timestamp": utc_now_iso()}


@router.get("/metrics")
def metrics(request: Request):
    container = _container(request)
    output = container.metrics.global_metrics()
    if container.circuit_breaker is not None:
        output["upstream_circuit"] = container.circuit_breaker.snapshot()
    return output


@router.get("/stock/{symbol}", response_model=SingleQuoteResponse)
def stock(symbol: str, request: Request):
    return _container(request).gateway.fetch(PathSymbolTrigger(symbol=symbol))


@router.get("/stocks", response_model=MultiQuoteResponse)
def stocks(request: Request, symbols: str | None = Query(None)):
    trigger = DelimitedListTrigger(symbols=symbols) if symbols is not None else DefaultTrigger()
    return _container(request).gateway.fetch(trigger)


@router.post("/stocks/refresh", response_model=MultiQuoteResponse)
def refresh(request: Request, body: RefreshRequest | None = None):
    if body is not None and body.symbols is not None:
        trigger = ExplicitListTrigger(symbols=body.symbols)
    else:
        trigger = DefaultTrigger()
    return _container(request).gateway.fetch(trigger)
