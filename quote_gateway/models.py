"""
Table definition for the quote cache.
One row per (symbol, dataType); the row is overwritten on every fresh fetch.
The table name comes from configuration, so the table is built per store.
"""
from sqlalchemy import JSON, Column, Integer, MetaData, String, Table


def build_quote_cache_table(table_name: str, metadata: MetaData | None = None) -> Table:
    """Cached payload per symbol and data kind, with absolute expiry."""
    return Table(
        table_name,
        metadata if metadata is not None else MetaData(),
        Column("symbol", String(20), primary_key=True),
        Column("dataType", String(20), primary_key=True),
        Column("data", JSON, nullable=False),
        Column("cachedAt", Integer, nullable=False),
        Column("expiresAt", Integer, nullable=False),
        Column("updatedAt", String(40), nullable=False),
    )
