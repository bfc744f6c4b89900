from __future__ import annotations

from fastapi import Path, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from clients.algolia import AlgoliaClient
from config.settings import settings
from core.following import FollowService
from data.repositories import FollowedItemStore

# Decimal digits with at least one non-zero digit, i.e. a positive integer
ITEM_ID_PATTERN = r"^[0-9]*[1-9][0-9]*$"
# Longer strings cannot be a real item id and would overflow int() parsing
ITEM_ID_MAX_LENGTH = 20


def parse_item_id(
    item_id: str = Path(
        pattern=ITEM_ID_PATTERN,
        max_length=ITEM_ID_MAX_LENGTH,
        description="HN item id",
    ),
) -> int:
    return int(item_id)


def get_follow_service(request: Request) -> FollowService:
    state = request.app.state
    store = FollowedItemStore(state.kv, prefix=settings.STORE_KEY_PREFIX)
    return FollowService(store, state.hn_client)


def get_algolia_client(request: Request) -> AlgoliaClient:
    return request.app.state.algolia_client


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.session_factory
