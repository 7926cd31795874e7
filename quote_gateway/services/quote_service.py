"""
Cache-aside quote retrieval.

Each symbol is resolved independently: cache first, provider on a miss, then a
best-effort write back. Provider failures yield ``None`` for that symbol only.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Sequence

from quote_gateway.cache.quote_cache import QuoteCache
from quote_gateway.errors import ProviderError
from quote_gateway.internal_metrics import MetricsCollector
from quote_gateway.providers.base import QuoteProvider
from quote_gateway.schemas.quote import QuoteSchema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuoteResult:
    quote: QuoteSchema
    from_cache: bool


class QuoteService:
    def __init__(
        self,
        provider: QuoteProvider,
        cache: QuoteCache,
        ttl_seconds: int,
        max_workers: int = 8,
        metrics: MetricsCollector | None = None,
    ):
        self.provider = provider
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.max_workers = max_workers
        self.metrics = metrics

    def resolve_quote(self, symbol: str) -> QuoteResult | None:
        cached = self.cache.lookup(symbol)
        if cached is not None:
            logger.info(f"Cache HIT for {symbol}")
            self._record_lookup(cache_hit=True)
            return QuoteResult(quote=cached, from_cache=True)

        logger.info(f"Cache MISS for {symbol}")
        self._record_lookup(cache_hit=False)
        try:
            quote = self.provider.fetch_quote(symbol)
        except ProviderError as exc:
            logger.warning(f"Provider {exc.kind} for {symbol}: {exc}")
            if self.metrics is not None:
                self.metrics.record_provider_failure(exc.kind)
            return None

        self.cache.store(symbol, quote, self.ttl_seconds)
        if self.metrics is not None:
            self.metrics.record_fresh_fetch()
        return QuoteResult(quote=quote, from_cache=False)

    def resolve_many(self, symbols: Sequence[str]) -> list[QuoteResult | None]:
        """Resolve all symbols concurrently; outcomes are returned in input order."""
        if not symbols:
            return []
        workers = max(1, min(self.max_workers, len(symbols)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="quote-fetch") as pool:
            return list(pool.map(self.resolve_quote, symbols))

    def _record_lookup(self, cache_hit: bool):
        if self.metrics is not None:
            self.metrics.record_lookup(cache_hit)
