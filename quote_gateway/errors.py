"""
Error taxonomy for quote retrieval.

Invocation-level errors (``NoSymbolsError``, ``SymbolNotFoundError``) surface to
the caller as an error payload. Provider and cache store errors are contained
per symbol and never abort sibling lookups.
"""


class QuoteGatewayError(Exception):
    """Base class for errors rendered as an error payload."""


class NoSymbolsError(QuoteGatewayError):
    def __init__(self, message: str = "No symbols provided."):
        super().__init__(message)


class SymbolNotFoundError(QuoteGatewayError):
    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Stock symbol '{symbol}' not found.")


class MalformedTriggerError(QuoteGatewayError):
    pass


class ProviderError(Exception):
    """Upstream quote provider failed for one symbol."""

    kind = "provider_error"

    def __init__(self, symbol: str, message: str):
        self.symbol = symbol
        super().__init__(message)


class UpstreamError(ProviderError):
    kind = "upstream_error"


class RateLimitError(ProviderError):
    kind = "rate_limited"


class NoDataError(ProviderError):
    kind = "no_data"


class TransportError(ProviderError):
    kind = "transport_error"


class CacheStoreError(Exception):
    """Raised by store backends; QuoteCache never lets it escape."""
