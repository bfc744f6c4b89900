"""Plain string key-value stores backing the followed-item snapshots.

The contract is deliberately small: get, put, delete and prefix listing with
no transactions and no conditional writes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert as sqlite_upsert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.errors import StoreError
from data.database import get_session
from data.schema import DBKeyValue

log = logging.getLogger(__name__)


class KeyValueStore(ABC):
    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    async def put(self, key: str, value: str) -> None:
        """Create or overwrite *key*."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove *key*; removing an absent key is not an error."""

    @abstractmethod
    async def list_keys(self, prefix: str) -> list[str]:
        """All keys starting with *prefix*, in no particular order."""


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store; contents are lost on restart."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(data or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def put(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def list_keys(self, prefix: str) -> list[str]:
        return [k for k in self._data if k.startswith(prefix)]


class SQLKeyValueStore(KeyValueStore):
    """One ``kv_entries`` row per key.

    Each call opens its own session, so concurrent check tasks never share a
    session between them.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._factory = session_factory

    @asynccontextmanager
    async def _session(self, op: str, key: str) -> AsyncIterator[AsyncSession]:
        try:
            async with get_session(self._factory) as session:
                yield session
        except SQLAlchemyError as exc:
            log.error("Key-value %s failed for %r: %s", op, key, exc)
            raise StoreError(f"Store {op} failed for {key}") from exc

    async def get(self, key: str) -> str | None:
        async with self._session("get", key) as session:
            row = await session.get(DBKeyValue, key)
            return row.value if row is not None else None

    async def put(self, key: str, value: str) -> None:
        stmt = (
            sqlite_upsert(DBKeyValue)
            .values(key=key, value=value)
            .on_conflict_do_update(index_elements=["key"], set_={"value": value})
        )
        async with self._session("put", key) as session:
            await session.execute(stmt)

    async def delete(self, key: str) -> None:
        async with self._session("delete", key) as session:
            await session.execute(delete(DBKeyValue).where(DBKeyValue.key == key))

    async def list_keys(self, prefix: str) -> list[str]:
        q = select(DBKeyValue.key).where(
            DBKeyValue.key.startswith(prefix, autoescape=True)
        )
        async with self._session("list", prefix) as session:
            result = await session.execute(q)
            return list(result.scalars().all())


def build_kv_store(
    backend: str, session_factory: async_sessionmaker[AsyncSession]
) -> KeyValueStore:
    """Store selected by the ``STORE_BACKEND`` setting."""
    if backend == "sql":
        return SQLKeyValueStore(session_factory)
    if backend == "memory":
        log.warning("Using in-memory store; followed items will not survive a restart")
        return MemoryKeyValueStore()
    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")
