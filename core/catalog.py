from __future__ import annotations

import logging
from typing import Protocol

from core.errors import HNClientError, UnsupportedItemTypeError
from core.models import ITEM_TYPES, AlgoliaItem, CatalogEntry

log = logging.getLogger(__name__)


class AlgoliaFetcher(Protocol):
    async def fetch_item(self, item_id: int) -> AlgoliaItem: ...


def count_all_children(item: AlgoliaItem) -> int:
    """Number of items anywhere below *item* in its reply tree."""
    stack = [item]
    count = 0
    while stack:
        current = stack.pop()
        count += len(current.children)
        stack.extend(current.children)
    return count


async def _story_title(client: AlgoliaFetcher, story_id: int) -> str | None:
    try:
        story = await client.fetch_item(story_id)
    except HNClientError as exc:
        log.warning("Could not look up parent story %d: %s", story_id, exc)
        return None
    return story.title or ""


async def build_catalog_entry(
    item_id: int, item: AlgoliaItem, client: AlgoliaFetcher
) -> CatalogEntry:
    """Summarise an Algolia item for the catalog.

    Comments are titled after the story they belong to, which costs one extra
    lookup; if that lookup fails the title is left empty.
    """
    if item.type not in ITEM_TYPES:
        raise UnsupportedItemTypeError(item_id, item.type)

    comments = count_all_children(item)
    replies = len(item.children)

    if item.type == "comment":
        title = ""
        if item.story_id:
            story_title = await _story_title(client, item.story_id)
            if story_title is not None:
                title = f"Comment on {story_title}"
        return CatalogEntry(
            id=item_id, title=title, type="comment", comments=comments, replies=replies
        )

    return CatalogEntry(
        id=item_id,
        title=item.title or "",
        type=item.type,
        comments=comments,
        replies=replies,
    )
