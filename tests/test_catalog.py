"""Tests for catalog entries built from Algolia items."""

from __future__ import annotations

import pytest

from core.catalog import build_catalog_entry, count_all_children
from core.errors import TransportError, UnsupportedItemTypeError
from core.models import AlgoliaItem, CatalogEntry
from data.database import get_session
from data.repositories import CatalogRepository


def _node(item_id: int, *children: AlgoliaItem) -> AlgoliaItem:
    return AlgoliaItem(id=item_id, type="comment", children=list(children))


class FakeAlgolia:
    def __init__(self, items: dict[int, AlgoliaItem | Exception]) -> None:
        self.items = items

    async def fetch_item(self, item_id: int) -> AlgoliaItem:
        result = self.items[item_id]
        if isinstance(result, Exception):
            raise result
        return result


class TestCountAllChildren:
    def test_leaf(self) -> None:
        assert count_all_children(_node(1)) == 0

    def test_nested(self) -> None:
        tree = _node(1, _node(2, _node(3), _node(4, _node(5))), _node(6))
        assert count_all_children(tree) == 5


class TestBuildCatalogEntry:
    @pytest.mark.asyncio
    async def test_story(self) -> None:
        item = AlgoliaItem(id=1, type="story", title="Show HN", children=[_node(2, _node(3))])
        entry = await build_catalog_entry(1, item, FakeAlgolia({}))
        assert entry == CatalogEntry(id=1, title="Show HN", type="story", comments=2, replies=1)

    @pytest.mark.asyncio
    async def test_comment_titled_after_story(self) -> None:
        parent = AlgoliaItem(id=100, type="story", title="Parent")
        item = AlgoliaItem(id=101, type="comment", story_id=100, children=[_node(102)])
        entry = await build_catalog_entry(101, item, FakeAlgolia({100: parent}))
        assert entry.title == "Comment on Parent"
        assert entry.type == "comment"
        assert entry.replies == 1

    @pytest.mark.asyncio
    async def test_comment_story_lookup_fails(self) -> None:
        item = AlgoliaItem(id=101, type="comment", story_id=100)
        client = FakeAlgolia({100: TransportError(100, "Error getting HN item 100")})
        entry = await build_catalog_entry(101, item, client)
        assert entry.title == ""

    @pytest.mark.asyncio
    async def test_poll_is_tracked(self) -> None:
        item = AlgoliaItem(id=7, type="poll", title="Tabs or spaces?")
        entry = await build_catalog_entry(7, item, FakeAlgolia({}))
        assert entry.type == "poll"

    @pytest.mark.asyncio
    async def test_unknown_type(self) -> None:
        item = AlgoliaItem(id=7, type=None)
        with pytest.raises(UnsupportedItemTypeError):
            await build_catalog_entry(7, item, FakeAlgolia({}))


class TestCatalogRepository:
    @pytest.mark.asyncio
    async def test_upsert_and_list(self, session_factory) -> None:
        async with get_session(session_factory) as session:
            repo = CatalogRepository(session)
            await repo.upsert(CatalogEntry(id=2, title="B", type="story", comments=1, replies=1))
            await repo.upsert(CatalogEntry(id=1, title="A", type="job", comments=0, replies=0))

        async with get_session(session_factory) as session:
            repo = CatalogRepository(session)
            row = await repo.upsert(
                CatalogEntry(id=2, title="B", type="story", comments=9, replies=4)
            )
            assert row.comments == 9

        async with get_session(session_factory) as session:
            rows = await CatalogRepository(session).list_entries()
            assert [(r.id, r.type, r.comments, r.replies) for r in rows] == [
                (1, "job", 0, 0),
                (2, "story", 9, 4),
            ]
