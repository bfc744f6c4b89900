from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from api.deps import get_algolia_client, get_session_factory, parse_item_id
from clients.algolia import AlgoliaClient
from core.catalog import build_catalog_entry
from core.errors import HNClientError, UnsupportedItemTypeError
from data.database import get_session
from data.repositories import CatalogRepository

router = APIRouter(prefix="/api/v2", tags=["catalog"])

ROUTES = {
    "GET /new-follow/{id}": "track an item with its full comment count",
    "GET /new-list": "list all tracked items",
}


def _entry_to_dict(e) -> dict:
    return {
        "id": e.id,
        "title": e.title,
        "type": e.type,
        "comments": e.comments,
        "replies": e.replies,
    }


@router.get("/")
async def index():
    return ROUTES


@router.api_route("/new-follow/{item_id}", methods=["GET", "POST"])
async def new_follow(
    hn_id: int = Depends(parse_item_id),
    client: AlgoliaClient = Depends(get_algolia_client),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    try:
        item = await client.fetch_item(hn_id)
        entry = await build_catalog_entry(hn_id, item, client)
    except (HNClientError, UnsupportedItemTypeError) as exc:
        raise HTTPException(400, str(exc)) from exc

    async with get_session(session_factory) as session:
        repo = CatalogRepository(session)
        row = await repo.upsert(entry)
        return JSONResponse(status_code=201, content=_entry_to_dict(row))


@router.get("/new-list")
async def new_list(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    async with get_session(session_factory) as session:
        repo = CatalogRepository(session)
        entries = await repo.list_entries()
        return [_entry_to_dict(e) for e in entries]
