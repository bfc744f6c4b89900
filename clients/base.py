from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from config.settings import settings
from core.errors import InvalidItemError, TransportError

log = logging.getLogger(__name__)

T = TypeVar("T")


def build_http_client() -> httpx.AsyncClient:
    """The process-wide client shared by every HN API wrapper."""
    return httpx.AsyncClient(
        headers={"User-Agent": settings.USER_AGENT},
        follow_redirects=True,
        timeout=settings.HTTP_TIMEOUT,
    )


class BaseItemClient(ABC):
    """Fetches single HN items by id from one JSON API."""

    api_name: str

    def __init__(
        self, base_url: str, client: httpx.AsyncClient | None = None
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or build_http_client()

    @abstractmethod
    async def fetch_item(self, item_id: int) -> Any:
        """Fetch and parse one item."""
        ...

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get_item(
        self, url: str, item_id: int, parse: Callable[[dict[str, Any]], T]
    ) -> T:
        """GET *url* once and parse it; every failure becomes a client error."""
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            log.warning("%s fetch failed for item %d: %s", self.api_name, item_id, exc)
            raise TransportError(item_id, f"Error getting HN item {item_id}") from exc

        # Unknown and deleted ids come back as a 200 with a null body
        if not isinstance(data, dict) or not data:
            raise InvalidItemError(item_id, f"HN item {item_id} is not a valid item")
        try:
            return parse(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidItemError(
                item_id, f"HN item {item_id} is not a valid item"
            ) from exc
