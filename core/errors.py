from __future__ import annotations


class HNFollowError(Exception):
    """Base class for every error raised by the follow service."""


class HNClientError(HNFollowError):
    """Fetching an item from an external HN API failed."""

    def __init__(self, item_id: int, message: str) -> None:
        super().__init__(message)
        self.item_id = item_id


class TransportError(HNClientError):
    """The request itself failed: network error, non-2xx status or bad JSON."""


class InvalidItemError(HNClientError):
    """The request succeeded but the API returned no item (HN answers ``null``)."""


class UnsupportedItemTypeError(HNFollowError):
    """The item's type cannot be turned into a notification."""

    def __init__(self, item_id: int, item_type: str | None) -> None:
        super().__init__(f"Can't format HN item {item_id} of type {item_type!r}")
        self.item_id = item_id
        self.item_type = item_type


class StoreError(HNFollowError):
    """A key-value store operation failed."""
