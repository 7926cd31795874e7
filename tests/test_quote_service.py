import threading

from fakes import FakeClock, FakeProvider, ForbiddenProvider, UnreachableStore, make_quote
from quote_gateway.cache.quote_cache import QuoteCache
from quote_gateway.cache.stores import InMemoryStore
from quote_gateway.errors import RateLimitError, TransportError, UpstreamError
from quote_gateway.internal_metrics import MetricsCollector
from quote_gateway.services.quote_service import QuoteResult, QuoteService


class RecordingCache(QuoteCache):
    def __init__(self, store, clock):
        super().__init__(store, clock=clock)
        self.store_calls = []

    def store(self, symbol, quote, ttl_seconds):
        self.store_calls.append((symbol, quote, ttl_seconds))
        return super().store(symbol, quote, ttl_seconds)


def test_fresh_entry_is_served_without_provider_call(quote_cache):
    quote_cache.store("AAPL", make_quote("AAPL"), ttl_seconds=30)
    service = QuoteService(ForbiddenProvider(), quote_cache, ttl_seconds=30)
    assert service.resolve_quote("AAPL") == QuoteResult(quote=make_quote("AAPL"), from_cache=True)


def test_miss_fetches_and_stores_once_with_configured_ttl(store, clock):
    cache = RecordingCache(store, clock)
    provider = FakeProvider(quotes={"MSFT": make_quote("MSFT")})
    service = QuoteService(provider, cache, ttl_seconds=45)

    result = service.resolve_quote("MSFT")

    assert result == QuoteResult(quote=make_quote("MSFT"), from_cache=False)
    assert provider.calls == ["MSFT"]
    assert cache.store_calls == [("MSFT", make_quote("MSFT"), 45)]
    assert service.resolve_quote("MSFT").from_cache is True
    assert provider.calls == ["MSFT"]


def test_expired_entry_refetches(quote_cache, clock):
    provider = FakeProvider(quotes={"AAPL": make_quote("AAPL", price=2.0)})
    quote_cache.store("AAPL", make_quote("AAPL", price=1.0), ttl_seconds=10)
    clock.advance(10)
    service = QuoteService(provider, quote_cache, ttl_seconds=10)
    result = service.resolve_quote("AAPL")
    assert result.from_cache is False
    assert result.quote.price == 2.0


def test_store_failure_still_returns_quote():
    store = UnreachableStore()
    provider = FakeProvider(quotes={"AAPL": make_quote("AAPL")})
    service = QuoteService(provider, QuoteCache(store), ttl_seconds=30)
    result = service.resolve_quote("AAPL")
    assert result == QuoteResult(quote=make_quote("AAPL"), from_cache=False)
    assert store.put_calls == 1


def test_provider_errors_are_isolated_per_symbol(quote_cache):
    metrics = MetricsCollector()
    provider = FakeProvider(
        quotes={"AAPL": make_quote("AAPL"), "MSFT": make_quote("MSFT")},
        errors={
            "BAD": UpstreamError("BAD", "Invalid API call."),
            "SLOW": TransportError("SLOW", "timed out"),
            "BUSY": RateLimitError("BUSY", "rate limited"),
        },
    )
    service = QuoteService(provider, quote_cache, ttl_seconds=30, metrics=metrics)

    outcomes = service.resolve_many(["AAPL", "BAD", "SLOW", "MSFT", "BUSY", "GONE"])

    assert [outcome.quote.symbol if outcome else None for outcome in outcomes] == [
        "AAPL", None, None, "MSFT", None, None,
    ]
    failures = metrics.global_metrics()["provider_failures"]
    assert failures == {"upstream_error": 1, "transport_error": 1, "rate_limited": 1, "no_data": 1}


def test_resolve_many_covers_every_symbol_in_order(quote_cache):
    symbols = ["AAPL", "MSFT", "AAPL", "TSLA", "NVDA"]
    provider = FakeProvider(quotes={symbol: make_quote(symbol) for symbol in symbols})
    service = QuoteService(provider, quote_cache, ttl_seconds=30, max_workers=3)
    outcomes = service.resolve_many(symbols)
    assert len(outcomes) == len(symbols)
    assert [outcome.quote.symbol for outcome in outcomes] == symbols


def test_resolve_many_runs_concurrently():
    barrier = threading.Barrier(3, timeout=5)

    class BarrierProvider(FakeProvider):
        def fetch_quote(self, symbol):
            barrier.wait()
            return make_quote(symbol)

    service = QuoteService(BarrierProvider(), QuoteCache(InMemoryStore(), clock=FakeClock()), ttl_seconds=30, max_workers=3)
    outcomes = service.resolve_many(["A", "B", "C"])
    assert all(outcome is not None for outcome in outcomes)


def test_resolve_many_empty():
    service = QuoteService(ForbiddenProvider(), QuoteCache(InMemoryStore()), ttl_seconds=30)
    assert service.resolve_many([]) == []
