from __future__ import annotations

from datetime import datetime
from typing import Sequence

from quote_gateway.errors import SymbolNotFoundError
from quote_gateway.schemas.quote import CachedQuoteSchema
from quote_gateway.schemas.responses import MultiQuoteResponse, SingleQuoteResponse
from quote_gateway.services.quote_service import QuoteResult
from quote_gateway.services.symbol_resolver import ResponseShape, SymbolRequest
from quote_gateway.utils.validators import utc_now_iso


def compose_response(
    request: SymbolRequest,
    outcomes: Sequence[QuoteResult | None],
    now: datetime | None = None,
) -> SingleQuoteResponse | MultiQuoteResponse:
    """
    Build the reply for a resolved request.

    SINGLE raises ``SymbolNotFoundError`` when its only symbol is absent.
    MULTI drops absent symbols and always succeeds, even when nothing survived.
    """
    if request.shape == ResponseShape.SINGLE:
        symbol = request.symbols[0]
        result = outcomes[0] if outcomes else None
        if result is None:
            raise SymbolNotFoundError(symbol)
        return SingleQuoteResponse(symbol=symbol, quote=result.quote, cached=result.from_cache)

    found = [outcome for outcome in outcomes if outcome is not None]
    quotes = [CachedQuoteSchema(**result.quote.model_dump(), cached=result.from_cache) for result in found]
    hits = sum(1 for result in found if result.from_cache)
    return MultiQuoteResponse(
        quotes=quotes,
        timestamp=utc_now_iso(now),
        cached=hits,
        fresh=len(found) - hits,
    )
