from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from api.deps import get_follow_service, parse_item_id
from core.errors import HNClientError, StoreError
from core.following import FollowService
from core.models import Followed, FollowedItem, NotFollowing, NotificationRecord

router = APIRouter(prefix="/api/v1", tags=["following"])

ROUTES = {
    "GET /follow/{id}": "follow an item",
    "GET /unfollow/{id}": "unfollow an item",
    "GET /get/{id}": "get an item's details",
    "GET /list": "list all items you're following",
    "GET /check": "check for new comments on items you're following",
}


def _item_to_dict(item: FollowedItem) -> dict:
    return {
        "key": item.key,
        "id": item.id,
        "comments": item.stored_comment_count,
        "url": item.url,
    }


def _notification_to_dict(n: NotificationRecord) -> dict:
    data = {
        "id": n.id,
        "new_comment_count": n.new_comment_count,
        "url": n.url,
        "has_notification": n.has_notification,
        "item_type": n.item_type,
    }
    if n.title is not None:
        data["title"] = n.title
    return data


@router.get("/")
async def index():
    return ROUTES


@router.api_route("/follow/{item_id}", methods=["GET", "POST"])
async def follow(
    hn_id: int = Depends(parse_item_id),
    service: FollowService = Depends(get_follow_service),
):
    try:
        result = await service.follow(hn_id)
    except HNClientError as exc:
        raise HTTPException(400, str(exc)) from exc

    if not isinstance(result, Followed):
        return {"message": f"Already following HN item {hn_id}"}

    return JSONResponse(
        status_code=201,
        content={
            "message": f"Followed HN item {hn_id}",
            "item": {"id": result.id, "comments": result.comments, "url": result.url},
        },
    )


@router.api_route("/unfollow/{item_id}", methods=["GET", "DELETE"])
async def unfollow(
    hn_id: int = Depends(parse_item_id),
    service: FollowService = Depends(get_follow_service),
):
    try:
        result = await service.unfollow(hn_id)
    except StoreError as exc:
        raise HTTPException(500, str(exc)) from exc

    if isinstance(result, NotFollowing):
        raise HTTPException(404, f"Not following HN item {hn_id}")
    return {"message": f"Unfollowed HN item {hn_id}"}


@router.get("/get/{item_id}")
async def get_item(
    hn_id: int = Depends(parse_item_id),
    service: FollowService = Depends(get_follow_service),
):
    item = await service.get(hn_id)
    if item is None:
        raise HTTPException(404, f"Not following HN item {hn_id}")
    return _item_to_dict(item)


@router.get("/list")
async def list_items(service: FollowService = Depends(get_follow_service)):
    try:
        items = await service.list_followed()
    except StoreError as exc:
        raise HTTPException(500, str(exc)) from exc
    return [_item_to_dict(i) for i in items]


@router.get("/check")
async def check(service: FollowService = Depends(get_follow_service)):
    try:
        report = await service.check_report()
    except StoreError as exc:
        raise HTTPException(500, str(exc)) from exc
    return JSONResponse(
        content=[_notification_to_dict(n) for n in report.notifications],
        headers={"X-Skipped-Items": str(report.skipped)},
    )
