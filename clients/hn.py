"""HN Firebase item API client (httpx)."""

from __future__ import annotations

import logging

import httpx

from clients.base import BaseItemClient
from config.settings import settings
from core.models import RemoteItem

log = logging.getLogger(__name__)


class HNClient(BaseItemClient):
    api_name = "hn"

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(settings.HN_API_URL, client)

    async def fetch_item(self, item_id: int) -> RemoteItem:
        item = await self._get_item(
            f"{self._base_url}/item/{item_id}.json", item_id, RemoteItem.from_api
        )
        log.debug(
            "HN item %d: type=%s, %d replies", item.id, item.type, item.comment_count
        )
        return item
