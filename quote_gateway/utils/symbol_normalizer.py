from typing import Iterable


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


def normalize_symbols(symbols: Iterable[str]) -> list[str]:
    """Trim and uppercase each symbol, keeping order and dropping blanks."""
    cleaned = (normalize_symbol(symbol) for symbol in symbols)
    return [symbol for symbol in cleaned if symbol]


def split_symbols(raw: str) -> list[str]:
    return normalize_symbols(raw.split(","))
