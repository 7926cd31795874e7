from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from quote_gateway.errors import NoSymbolsError
from quote_gateway.schemas.trigger import (
    DefaultTrigger,
    DelimitedListTrigger,
    ExplicitListTrigger,
    PathSymbolTrigger,
    Trigger,
)
from quote_gateway.utils.symbol_normalizer import normalize_symbol, normalize_symbols, split_symbols

logger = logging.getLogger(__name__)


class ResponseShape(str, Enum):
    SINGLE = "SINGLE"
    MULTI = "MULTI"


@dataclass(frozen=True)
class SymbolRequest:
    symbols: list[str]
    shape: ResponseShape


def resolve_symbols(trigger: Trigger, default_symbols: Sequence[str]) -> SymbolRequest:
    """Turn a trigger into the ordered symbols to fetch and the response shape."""
    if isinstance(trigger, PathSymbolTrigger):
        symbol = normalize_symbol(trigger.symbol)
        request = SymbolRequest(symbols=[symbol] if symbol else [], shape=ResponseShape.SINGLE)
    elif isinstance(trigger, DelimitedListTrigger):
        request = SymbolRequest(symbols=split_symbols(trigger.symbols), shape=ResponseShape.MULTI)
    elif isinstance(trigger, ExplicitListTrigger):
        request = SymbolRequest(symbols=normalize_symbols(trigger.symbols), shape=ResponseShape.MULTI)
    elif isinstance(trigger, DefaultTrigger):
        request = SymbolRequest(symbols=normalize_symbols(default_symbols), shape=ResponseShape.MULTI)
    else:
        raise TypeError(f"Unsupported trigger: {trigger!r}")

    if not request.symbols:
        raise NoSymbolsError()

    logger.info(f"Resolved {trigger.kind} trigger to {request.shape.value}: {', '.join(request.symbols)}")
    return request
