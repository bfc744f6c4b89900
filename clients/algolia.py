"""HN Algolia item API client (httpx).

Algolia embeds the full reply tree in each item, which makes it the cheap way
to count every descendant of an item in one request.
"""

from __future__ import annotations

import httpx

from clients.base import BaseItemClient
from config.settings import settings
from core.models import AlgoliaItem


class AlgoliaClient(BaseItemClient):
    api_name = "algolia"

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(settings.ALGOLIA_API_URL, client)

    async def fetch_item(self, item_id: int) -> AlgoliaItem:
        return await self._get_item(
            f"{self._base_url}/items/{item_id}", item_id, AlgoliaItem.from_api
        )
