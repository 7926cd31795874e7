"""
Key-value store backends behind the quote cache.

Items are plain dicts keyed by ``symbol`` and ``dataType``. Backends do not
evict on read; expiry is enforced by the caller.
"""
from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from threading import Lock
from typing import Any

from sqlalchemy import Table, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from quote_gateway.database import get_db_session
from quote_gateway.errors import CacheStoreError

_ITEM_FIELDS = ("symbol", "dataType", "data", "cachedAt", "expiresAt", "updatedAt")


class KeyValueStore(ABC):
    @abstractmethod
    def get_item(self, symbol: str, data_type: str) -> dict[str, Any] | None:
        raise NotImplementedError

    @abstractmethod
    def put_item(self, item: dict[str, Any]) -> None:
        raise NotImplementedError


class InMemoryStore(KeyValueStore):
    def __init__(self):
        self._items: dict[tuple[str, str], dict[str, Any]] = {}
        self._lock = Lock()

    def get_item(self, symbol: str, data_type: str) -> dict[str, Any] | None:
        with self._lock:
            item = self._items.get((symbol, data_type))
            return copy.deepcopy(item) if item is not None else None

    def put_item(self, item: dict[str, Any]) -> None:
        key = (item["symbol"], item["dataType"])
        with self._lock:
            self._items[key] = copy.deepcopy(item)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class DatabaseStore(KeyValueStore):
    """SQL-backed store; every backend failure surfaces as ``CacheStoreError``."""

    def __init__(self, session_factory: sessionmaker, table: Table):
        self.session_factory = session_factory
        self.table = table

    def _key_clause(self, symbol: str, data_type: str):
        columns = self.table.c
        return (columns.symbol == symbol) & (columns.dataType == data_type)

    def get_item(self, symbol: str, data_type: str) -> dict[str, Any] | None:
        try:
            with get_db_session(self.session_factory) as session:
                row = session.execute(select(self.table).where(self._key_clause(symbol, data_type))).mappings().first()
                return dict(row) if row is not None else None
        except SQLAlchemyError as exc:
            raise CacheStoreError(f"get_item failed for {symbol}: {exc}") from exc

    def put_item(self, item: dict[str, Any]) -> None:
        values = {name: item[name] for name in _ITEM_FIELDS}
        try:
            with get_db_session(self.session_factory) as session:
                updated = session.execute(
                    self.table.update().where(self._key_clause(values["symbol"], values["dataType"])).values(**values)
                )
                if updated.rowcount == 0:
                    session.execute(self.table.insert().values(**values))
        except SQLAlchemyError as exc:
            raise CacheStoreError(f"put_item failed for {item.get('symbol')}: {exc}") from exc
