"""Follow/check reconciliation between the followed-item store and live HN."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from core.errors import UnsupportedItemTypeError
from core.models import (
    AlreadyFollowing,
    CheckReport,
    Followed,
    FollowedItem,
    FollowResult,
    NotFollowing,
    NotificationRecord,
    RemoteItem,
    Unfollowed,
    UnfollowResult,
    item_url,
)
from data.repositories import FollowedItemStore

log = logging.getLogger(__name__)

# Only these types get a check notification; polls, poll options and jobs
# can be followed and listed but are never formatted.
NOTIFIABLE_TYPES = frozenset({"story", "comment"})


class ItemFetcher(Protocol):
    async def fetch_item(self, item_id: int) -> RemoteItem: ...


class FollowService:
    """Follows, unfollows and checks HN items.

    The store adapter and the HN client are passed in; this class holds no
    other state, so one instance per request is cheap.
    """

    def __init__(self, store: FollowedItemStore, client: ItemFetcher) -> None:
        self._store = store
        self._client = client

    async def follow(self, item_id: int) -> FollowResult:
        key = self._store.derive_key(item_id)
        if await self._store.load(key) is not None:
            return AlreadyFollowing(id=item_id)

        remote = await self._client.fetch_item(item_id)
        comments = remote.comment_count
        await self._store.save(key, comments)
        log.info("Followed HN item %d (%d comments)", item_id, comments)
        return Followed(id=item_id, comments=comments, url=item_url(item_id))

    async def unfollow(self, item_id: int) -> UnfollowResult:
        key = self._store.derive_key(item_id)
        if await self._store.load(key) is None:
            return NotFollowing(id=item_id)

        await self._store.delete(key)
        log.info("Unfollowed HN item %d", item_id)
        return Unfollowed(id=item_id)

    async def get(self, item_id: int) -> FollowedItem | None:
        return await self._store.load(self._store.derive_key(item_id))

    async def list_followed(self) -> list[FollowedItem]:
        return await self._store.list_all()

    async def reconcile(
        self, remote: RemoteItem, followed: FollowedItem
    ) -> NotificationRecord:
        """Compare live and stored reply counts, persisting any increase."""
        if remote.type not in NOTIFIABLE_TYPES:
            raise UnsupportedItemTypeError(followed.id, remote.type)

        current = remote.comment_count
        stored = followed.stored_comment_count or 0

        if stored < current:
            await self._store.save(followed.key, current)

        return NotificationRecord(
            id=followed.id,
            new_comment_count=current - stored,
            url=item_url(followed.id),
            has_notification=stored < current,
            item_type=remote.type,
            title=(remote.title or None) if remote.type == "story" else None,
        )

    async def check_all(self) -> list[NotificationRecord]:
        return (await self.check_report()).notifications

    async def check_report(self) -> CheckReport:
        """Check every followed item concurrently.

        A failure on one item drops that item from the report and leaves the
        others untouched.
        """
        items = await self._store.list_all()
        results = await asyncio.gather(*(self._check_one(item) for item in items))
        notifications = [r for r in results if r is not None]
        skipped = len(results) - len(notifications)
        log.info(
            "Checked %d followed items: %d with new comments, %d skipped",
            len(items),
            sum(1 for n in notifications if n.has_notification),
            skipped,
        )
        return CheckReport(notifications=notifications, skipped=skipped)

    async def _check_one(self, item: FollowedItem) -> NotificationRecord | None:
        try:
            remote = await self._client.fetch_item(item.id)
            return await self.reconcile(remote, item)
        except Exception as exc:
            log.warning("Skipping HN item %d during check: %s", item.id, exc)
            return None
