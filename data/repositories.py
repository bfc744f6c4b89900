from __future__ import annotations

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_upsert
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from core.errors import StoreError
from core.models import CatalogEntry, FollowedItem
from data.kv import KeyValueStore
from data.schema import DBFollowedItem

log = logging.getLogger(__name__)

# ── key encoding ─────────────────────────────────────────────────────


def derive_key(item_id: int, prefix: str | None = None) -> str:
    """Store key for an HN item id: the prefix followed by the decimal id."""
    if prefix is None:
        prefix = settings.STORE_KEY_PREFIX
    if item_id <= 0:
        raise ValueError(f"HN item ids are positive, got {item_id}")
    return f"{prefix}{item_id}"


def derive_id(key: str, prefix: str | None = None) -> int:
    """Inverse of :func:`derive_key`."""
    if prefix is None:
        prefix = settings.STORE_KEY_PREFIX
    if not key.startswith(prefix):
        raise ValueError(f"Key {key!r} does not start with {prefix!r}")
    suffix = key[len(prefix):]
    if not suffix.isascii() or not suffix.isdigit():
        raise ValueError(f"Key {key!r} does not end in a decimal id")
    return int(suffix)


# ── FollowedItemStore ────────────────────────────────────────────────


class FollowedItemStore:
    """Maps followed items onto a :class:`KeyValueStore`.

    The stored value is the comment count as a decimal string.
    """

    def __init__(self, kv: KeyValueStore, prefix: str | None = None) -> None:
        self._kv = kv
        self._prefix = settings.STORE_KEY_PREFIX if prefix is None else prefix

    def derive_key(self, item_id: int) -> str:
        return derive_key(item_id, self._prefix)

    def derive_id(self, key: str) -> int:
        return derive_id(key, self._prefix)

    async def load(self, key: str) -> FollowedItem | None:
        raw = await self._kv.get(key)
        if raw is None:
            return None
        if not raw.isascii() or not raw.isdigit():
            raise StoreError(f"Stored count for {key} is not a number: {raw!r}")
        count = int(raw)
        return FollowedItem(key=key, id=self.derive_id(key), stored_comment_count=count)

    async def save(self, key: str, count: int) -> None:
        await self._kv.put(key, str(count))

    async def delete(self, key: str) -> None:
        await self._kv.delete(key)

    async def list_all(self) -> list[FollowedItem]:
        keys = await self._kv.list_keys(self._prefix)
        results = await asyncio.gather(
            *(self.load(key) for key in keys), return_exceptions=True
        )
        items: list[FollowedItem] = []
        for key, result in zip(keys, results):
            if isinstance(result, BaseException):
                log.debug("Dropping %s from listing: %s", key, result)
                continue
            if result is not None:
                items.append(result)
        return items


# ── CatalogRepository ────────────────────────────────────────────────


class CatalogRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._s = session

    async def upsert(self, entry: CatalogEntry) -> DBFollowedItem:
        """Insert the entry, or refresh its counts if it is already tracked."""
        stmt = (
            sqlite_upsert(DBFollowedItem)
            .values(
                id=entry.id,
                title=entry.title,
                type=entry.type,
                comments=entry.comments,
                replies=entry.replies,
            )
            .on_conflict_do_update(
                index_elements=["id"],
                set_={
                    "title": entry.title,
                    "comments": entry.comments,
                    "replies": entry.replies,
                },
            )
            .returning(DBFollowedItem)
        )
        result = await self._s.execute(stmt)
        return result.scalar_one()

    async def list_entries(self) -> list[DBFollowedItem]:
        result = await self._s.execute(select(DBFollowedItem).order_by(DBFollowedItem.id))
        return list(result.scalars().all())
