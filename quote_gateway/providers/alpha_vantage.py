from __future__ import annotations

import json
import logging
import socket
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from quote_gateway.errors import NoDataError, RateLimitError, TransportError, UpstreamError
from quote_gateway.providers.base import QuoteProvider
from quote_gateway.resilience_circuit_breaker import UpstreamCircuitBreaker
from quote_gateway.schemas.quote import QuoteSchema
from quote_gateway.utils.validators import to_native_float, to_native_int

logger = logging.getLogger(__name__)

# Alpha Vantage reports throttling under "Note"; newer responses use "Information".
_RATE_LIMIT_FIELDS = ("Note", "Information")


def parse_global_quote(symbol: str, payload: Any) -> QuoteSchema:
    """Map a GLOBAL_QUOTE payload to a quote, raising on the provider's error shapes."""
    if not isinstance(payload, dict):
        raise TransportError(symbol, "Unexpected response payload")

    if payload.get("Error Message"):
        raise UpstreamError(symbol, str(payload["Error Message"]))

    for field in _RATE_LIMIT_FIELDS:
        if payload.get(field):
            raise RateLimitError(symbol, str(payload[field]))

    global_quote = payload.get("Global Quote")
    if not isinstance(global_quote, dict) or not global_quote:
        raise NoDataError(symbol, f"No data found for {symbol}")

    return QuoteSchema(
        symbol=symbol,
        price=to_native_float(global_quote.get("05. price")),
        change=to_native_float(global_quote.get("09. change")),
        change_percent=to_native_float(global_quote.get("10. change percent")),
        volume=to_native_int(global_quote.get("06. volume")),
        latest_trading_day=str(global_quote.get("07. latest trading day") or ""),
        previous_close=to_native_float(global_quote.get("08. previous close")),
        open=to_native_float(global_quote.get("02. open")),
        high=to_native_float(global_quote.get("03. high")),
        low=to_native_float(global_quote.get("04. low")),
    )


class AlphaVantageProvider(QuoteProvider):
    """Single-symbol GLOBAL_QUOTE client. Free tier: 5 calls/minute, 500/day."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://www.alphavantage.co/query",
        function: str = "GLOBAL_QUOTE",
        timeout_seconds: float = 10,
        circuit_breaker: UpstreamCircuitBreaker | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.function = function
        self.timeout_seconds = timeout_seconds
        self.circuit_breaker = circuit_breaker

    def _get_json(self, params: dict[str, Any]) -> Any:
        request = Request(f"{self.base_url}?{urlencode(params)}", headers={"User-Agent": "quote-gateway/1.0"})
        with urlopen(request, timeout=self.timeout_seconds) as response:
            return json.loads(response.read().decode("utf-8"))

    def fetch_quote(self, symbol: str) -> QuoteSchema:
        if not self.api_key:
            raise TransportError(symbol, "ALPHA_VANTAGE_API_KEY not configured")

        if self.circuit_breaker is not None and not self.circuit_breaker.can_execute():
            raise RateLimitError(symbol, "Upstream rate limit cool-down in effect")

        logger.info(f"Fetching from Alpha Vantage: {symbol}")
        try:
            quote = self._request_quote(symbol)
        except RateLimitError:
            logger.error(f"Alpha Vantage rate limit hit for {symbol}")
            self._settle(rate_limited=True)
            raise
        except (UpstreamError, NoDataError):
            self._settle(rate_limited=False)
            raise
        except Exception:
            # transport or unexpected failure: upstream said nothing about the limit
            if self.circuit_breaker is not None:
                self.circuit_breaker.record_inconclusive()
            raise

        self._settle(rate_limited=False)
        logger.info(f"Fetched {symbol}: ${quote.price} ({quote.change_percent:+}%)")
        return quote

    def _request_quote(self, symbol: str) -> QuoteSchema:
        try:
            payload = self._get_json({"function": self.function, "symbol": symbol, "apikey": self.api_key})
        except HTTPError as exc:
            if exc.code == 429:
                raise RateLimitError(symbol, "API rate limit exceeded") from exc
            raise TransportError(symbol, f"HTTP {exc.code} from upstream") from exc
        except (URLError, TimeoutError, socket.timeout, OSError, ValueError) as exc:
            raise TransportError(symbol, f"Request failed: {exc}") from exc
        return parse_global_quote(symbol, payload)

    def _settle(self, rate_limited: bool):
        if self.circuit_breaker is None:
            return
        if rate_limited:
            self.circuit_breaker.record_failure()
        else:
            self.circuit_breaker.record_success()
