from __future__ import annotations

import logging
import time
from typing import Sequence

from quote_gateway.internal_metrics import MetricsCollector
from quote_gateway.schemas.responses import MultiQuoteResponse, SingleQuoteResponse
from quote_gateway.schemas.trigger import Trigger
from quote_gateway.services.quote_service import QuoteService
from quote_gateway.services.response_composer import compose_response
from quote_gateway.services.symbol_resolver import resolve_symbols

logger = logging.getLogger(__name__)


class QuoteGateway:
    """Trigger in, composed response out: resolve, fan out, compose."""

    def __init__(self, service: QuoteService, default_symbols: Sequence[str], metrics: MetricsCollector | None = None):
        self.service = service
        self.default_symbols = list(default_symbols)
        self.metrics = metrics

    def fetch(self, trigger: Trigger) -> SingleQuoteResponse | MultiQuoteResponse:
        start = time.perf_counter()
        symbol_count = 0
        success = False
        try:
            request = resolve_symbols(trigger, self.default_symbols)
            symbol_count = len(request.symbols)
            outcomes = self.service.resolve_many(request.symbols)
            response = compose_response(request, outcomes)
            success = True
            return response
        finally:
            latency_ms = round((time.perf_counter() - start) * 1000, 2)
            if self.metrics is not None:
                self.metrics.record_request(symbol_count, success=success, latency_ms=latency_ms)
            logger.info(
                "quotes_resolved",
                extra={"trigger": trigger.kind, "symbols": symbol_count, "success": success, "latency_ms": latency_ms},
            )
