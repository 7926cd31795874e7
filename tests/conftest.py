import pytest

from fakes import FakeClock
from quote_gateway.cache.quote_cache import QuoteCache
from quote_gateway.cache.stores import InMemoryStore


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def quote_cache(store, clock):
    return QuoteCache(store, clock=clock)
