from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from config.settings import settings

ITEM_TYPES = ("story", "comment", "poll", "pollopt", "job")


def item_url(item_id: int) -> str:
    """Public news.ycombinator.com URL for an item."""
    return f"{settings.HN_ITEM_URL}?id={item_id}"


@dataclass
class RemoteItem:
    """An item as returned by the HN Firebase API."""

    id: int
    type: str | None = None  # "story", "comment", "poll", "pollopt", "job"
    title: str | None = None
    child_ids: list[int] = field(default_factory=list)
    by: str | None = None
    text: str | None = None
    url: str | None = None
    time: int | None = None
    score: int | None = None
    descendants: int | None = None
    parent: int | None = None
    dead: bool = False
    deleted: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> RemoteItem:
        return cls(
            id=int(data["id"]),
            type=data.get("type"),
            title=data.get("title"),
            child_ids=list(data.get("kids") or []),
            by=data.get("by"),
            text=data.get("text"),
            url=data.get("url"),
            time=data.get("time"),
            score=data.get("score"),
            descendants=data.get("descendants"),
            parent=data.get("parent"),
            dead=bool(data.get("dead", False)),
            deleted=bool(data.get("deleted", False)),
        )

    @property
    def comment_count(self) -> int:
        return len(self.child_ids)


@dataclass
class FollowedItem:
    """Snapshot of a followed item as kept in the key-value store."""

    key: str
    id: int
    stored_comment_count: int = 0

    @property
    def url(self) -> str:
        return item_url(self.id)


@dataclass
class NotificationRecord:
    id: int
    new_comment_count: int
    url: str
    has_notification: bool
    item_type: str
    title: str | None = None  # stories only


@dataclass
class CheckReport:
    """Outcome of checking every followed item."""

    notifications: list[NotificationRecord]
    skipped: int = 0


@dataclass
class Followed:
    id: int
    comments: int
    url: str


@dataclass
class AlreadyFollowing:
    id: int


@dataclass
class Unfollowed:
    id: int


@dataclass
class NotFollowing:
    id: int


FollowResult = Union[Followed, AlreadyFollowing]
UnfollowResult = Union[Unfollowed, NotFollowing]


# ── catalog ──────────────────────────────────────────────────────────


@dataclass
class AlgoliaItem:
    """An item as returned by ``/api/v1/items/{id}`` on HN Algolia.

    Unlike the Firebase API the whole reply tree is embedded in ``children``.
    """

    id: int
    type: str | None = None
    title: str | None = None
    story_id: int | None = None
    children: list[AlgoliaItem] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> AlgoliaItem:
        return cls(
            id=int(data["id"]),
            type=data.get("type"),
            title=data.get("title"),
            story_id=data.get("story_id"),
            children=[
                cls.from_api(child)
                for child in data.get("children") or []
                if isinstance(child, dict)
            ],
        )


@dataclass
class CatalogEntry:
    """A tracked item with its comment totals."""

    id: int
    title: str
    type: str
    comments: int  # every descendant
    replies: int  # direct children only
