from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock


@dataclass
class GatewayMetrics:
    total_requests: int = 0
    failed_requests: int = 0
    symbols_requested: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    fresh_fetches: int = 0
    cache_store_failures: int = 0
    provider_failures: dict[str, int] = field(default_factory=dict)
    latency_total_ms: float = 0.0

    def avg_latency_ms(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.latency_total_ms / self.total_requests


class MetricsCollector:
    def __init__(self):
        self._metrics = GatewayMetrics()
        self._lock = Lock()

    def record_request(self, symbol_count: int, success: bool, latency_ms: float):
        with self._lock:
            m = self._metrics
            m.total_requests += 1
            m.symbols_requested += symbol_count
            m.latency_total_ms += max(latency_ms, 0.0)
            if not success:
                m.failed_requests += 1

    def record_lookup(self, cache_hit: bool):
        with self._lock:
            if cache_hit:
                self._metrics.cache_hits += 1
            else:
                self._metrics.cache_misses += 1

    def record_fresh_fetch(self):
        with self._lock:
            self._metrics.fresh_fetches += 1

    def record_provider_failure(self, kind: str):
        with self._lock:
            failures = self._metrics.provider_failures
            failures[kind] = failures.get(kind, 0) + 1

    def record_cache_store_failure(self):
        with self._lock:
            self._metrics.cache_store_failures += 1

    def global_metrics(self) -> dict[str, float | int | dict]:
        with self._lock:
            m = self._metrics
            lookups = m.cache_hits + m.cache_misses
            cache_hit_rate = 0.0 if lookups == 0 else (m.cache_hits / lookups)
            return {
                "request_count": m.total_requests,
                "failed_requests": m.failed_requests,
                "symbols_requested": m.symbols_requested,
                "cache_hits": m.cache_hits,
                "cache_misses": m.cache_misses,
                "cache_hit_rate": round(cache_hit_rate, 4),
                "fresh_fetches": m.fresh_fetches,
                "cache_store_failures": m.cache_store_failures,
                "provider_failures": dict(m.provider_failures),
                "average_latency_ms": round(m.avg_latency_ms(), 3),
            }
