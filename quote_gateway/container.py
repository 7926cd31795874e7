"""
Builds the process-wide collaborators from settings.

Instances are created once per process and passed down explicitly; nothing
in the core reads configuration or module globals.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from quote_gateway.cache.quote_cache import QuoteCache
from quote_gateway.cache.stores import DatabaseStore, InMemoryStore, KeyValueStore
from quote_gateway.config.settings import Settings, settings as default_settings
from quote_gateway.database import create_session_factory, create_store_engine, init_db
from quote_gateway.models import build_quote_cache_table
from quote_gateway.internal_metrics import MetricsCollector
from quote_gateway.providers.alpha_vantage import AlphaVantageProvider
from quote_gateway.providers.base import QuoteProvider
from quote_gateway.resilience_circuit_breaker import UpstreamCircuitBreaker
from quote_gateway.services.gateway import QuoteGateway
from quote_gateway.services.quote_service import QuoteService

logger = logging.getLogger(__name__)


@dataclass
class Container:
    gateway: QuoteGateway
    metrics: MetricsCollector
    circuit_breaker: UpstreamCircuitBreaker | None = None


def build_store(config: Settings) -> KeyValueStore:
    if config.cache_backend == "memory":
        return InMemoryStore()
    if config.cache_backend == "database":
        engine = create_store_engine(config.database_url)
        table = build_quote_cache_table(config.cache_table_name)
        init_db(engine, table)
        return DatabaseStore(create_session_factory(engine), table)
    raise ValueError(f"Unsupported cache backend '{config.cache_backend}'")


def build_container(
    config: Settings = default_settings,
    store: KeyValueStore | None = None,
    provider: QuoteProvider | None = None,
) -> Container:
    metrics = MetricsCollector()
    circuit_breaker = None
    if provider is None:
        circuit_breaker = UpstreamCircuitBreaker(
            failure_threshold=config.rate_limit_failure_threshold,
            recovery_timeout_seconds=config.rate_limit_cooldown_seconds,
        )
        provider = AlphaVantageProvider(
            api_key=config.alpha_vantage_api_key,
            base_url=config.alpha_vantage_base_url,
            function=config.alpha_vantage_function,
            timeout_seconds=config.request_timeout_seconds,
            circuit_breaker=circuit_breaker,
        )
    cache = QuoteCache(store if store is not None else build_store(config), metrics=metrics)
    service = QuoteService(
        provider,
        cache,
        ttl_seconds=config.cache_ttl_seconds,
        max_workers=config.max_concurrent_fetches,
        metrics=metrics,
    )
    logger.info(
        "Quote gateway configured",
        extra={"cache_backend": config.cache_backend, "cache_ttl_seconds": config.cache_ttl_seconds},
    )
    return Container(
        gateway=QuoteGateway(service, config.default_symbols, metrics=metrics),
        metrics=metrics,
        circuit_breaker=circuit_breaker,
    )


@lru_cache(maxsize=1)
def get_container() -> Container:
    return build_container()
