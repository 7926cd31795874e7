from __future__ import annotations

from abc import ABC, abstractmethod

from quote_gateway.schemas.quote import QuoteSchema


class QuoteProvider(ABC):
    @abstractmethod
    def fetch_quote(self, symbol: str) -> QuoteSchema:
        """Return a quote or raise a ``ProviderError`` subclass."""
        raise NotImplementedError
