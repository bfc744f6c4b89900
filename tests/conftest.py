from __future__ import annotations

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from core.errors import InvalidItemError
from core.following import FollowService
from core.models import RemoteItem
from data.database import init_db
from data.kv import MemoryKeyValueStore
from data.repositories import FollowedItemStore


class FakeHNClient:
    """Serves canned items; records every id it was asked for."""

    def __init__(self, items: dict[int, RemoteItem | Exception] | None = None) -> None:
        self.items: dict[int, RemoteItem | Exception] = dict(items or {})
        self.calls: list[int] = []

    async def fetch_item(self, item_id: int) -> RemoteItem:
        self.calls.append(item_id)
        result = self.items.get(item_id)
        if result is None:
            raise InvalidItemError(item_id, f"HN item {item_id} is not a valid item")
        if isinstance(result, Exception):
            raise result
        return result


def story(item_id: int, replies: int = 0, title: str = "A story") -> RemoteItem:
    return RemoteItem(
        id=item_id, type="story", title=title, child_ids=list(range(1000, 1000 + replies))
    )


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def store(kv) -> FollowedItemStore:
    return FollowedItemStore(kv, prefix="hn_")


@pytest.fixture
def hn() -> FakeHNClient:
    return FakeHNClient()


@pytest.fixture
def service(store, hn) -> FollowService:
    return FollowService(store, hn)


@pytest.fixture
def db_engine(tmp_path):
    # NullPool: no connection outlives the event loop that opened it
    return create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool
    )


@pytest_asyncio.fixture
async def session_factory(db_engine):
    await init_db(db_engine)
    yield async_sessionmaker(db_engine, expire_on_commit=False)
    await db_engine.dispose()
