from pydantic import BaseModel

from quote_gateway.schemas.quote import CachedQuoteSchema, QuoteSchema


class SingleQuoteResponse(BaseModel):
    symbol: str
    quote: QuoteSchema
    cached: bool


class MultiQuoteResponse(BaseModel):
    quotes: list[CachedQuoteSchema]
    timestamp: str
    cached: int
    fresh: int


class ErrorResponse(BaseModel):
    """Error payload shared by every entry point."""

    success: bool = False
    error: str
    timestamp: str

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "error": "Stock symbol 'ZZZZ' not found.",
                "timestamp": "2024-01-01T00:00:00.000Z",
            }
        }


class RefreshRequest(BaseModel):
    symbols: list[str] | None = None
