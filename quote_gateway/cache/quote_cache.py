"""
Quote cache over an external key-value store.

Caching is an optimization only: read failures behave like misses and write
failures are logged, never raised.
"""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Callable

from pydantic import ValidationError

from quote_gateway.cache.stores import KeyValueStore
from quote_gateway.errors import CacheStoreError
from quote_gateway.internal_metrics import MetricsCollector
from quote_gateway.schemas.quote import CacheEntrySchema, QuoteSchema
from quote_gateway.utils.validators import utc_now_iso

logger = logging.getLogger(__name__)

QUOTE_DATA_TYPE = "quote"


class QuoteCache:
    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], float] = time.time,
        metrics: MetricsCollector | None = None,
    ):
        self.backend = store
        self.clock = clock
        self.metrics = metrics

    def lookup(self, symbol: str) -> QuoteSchema | None:
        """Return the cached quote if an entry exists and has not expired."""
        try:
            item = self.backend.get_item(symbol, QUOTE_DATA_TYPE)
        except CacheStoreError as exc:
            logger.warning(f"Cache read error ({symbol}): {exc}")
            self._record_store_failure()
            return None

        if item is None:
            return None

        try:
            entry = CacheEntrySchema.model_validate(item)
        except ValidationError as exc:
            logger.warning(f"Discarding malformed cache entry for {symbol}: {exc}")
            return None

        now = self.clock()
        if not entry.is_fresh(now):
            logger.info(f"Cache data for {symbol} expired (expiresAt: {entry.expires_at})")
            return None
        return entry.data

    def store(self, symbol: str, quote: QuoteSchema, ttl_seconds: int) -> bool:
        """Write or overwrite the entry; returns False if the store rejected it."""
        now = int(self.clock())
        entry = CacheEntrySchema(
            symbol=symbol,
            data_type=QUOTE_DATA_TYPE,
            data=quote,
            cached_at=now,
            expires_at=now + ttl_seconds,
            updated_at=utc_now_iso(datetime.fromtimestamp(now, tz=timezone.utc)),
        )
        try:
            self.backend.put_item(entry.model_dump(by_alias=True))
        except CacheStoreError as exc:
            logger.warning(f"Cache save error ({symbol}): {exc}")
            self._record_store_failure()
            return False
        logger.info(f"Saved {symbol} to cache (expires in {ttl_seconds}s)")
        return True

    def _record_store_failure(self):
        if self.metrics is not None:
            self.metrics.record_cache_store_failure()
