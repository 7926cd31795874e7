from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class QuoteSchema(BaseModel):
    """A fully formed quote; numeric gaps are zero, never missing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    symbol: str
    price: float = 0.0
    change: float = 0.0
    change_percent: float = 0.0
    volume: int = 0
    latest_trading_day: str = ""
    previous_close: float = 0.0
    open: float = 0.0
    high: float = 0.0
    low: float = 0.0


class CachedQuoteSchema(QuoteSchema):
    cached: bool


class CacheEntrySchema(BaseModel):
    """Persisted wrapper around a quote, keyed by ``(symbol, dataType)``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    symbol: str
    data_type: str
    data: QuoteSchema
    cached_at: int
    expires_at: int
    updated_at: str

    def is_fresh(self, now: float) -> bool:
        return self.expires_at > now
