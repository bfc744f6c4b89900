from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routers import catalog, following
from core.errors import HNFollowError

log = logging.getLogger(__name__)


def _message(message: Any, status_code: int, headers=None) -> JSONResponse:
    return JSONResponse({"message": message}, status_code=status_code, headers=headers)


def create_app(**state: Any) -> FastAPI:
    """Build the API.

    Keyword arguments are stored on ``app.state`` (``kv``, ``hn_client``,
    ``algolia_client``, ``session_factory``); ``main.py`` fills in whatever is
    missing at startup.
    """
    app = FastAPI(title="HN Follow", version="0.1.0")
    for name, value in state.items():
        setattr(app.state, name, value)

    # Every error body has the same {"message": ...} shape as success messages
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _message(exc.detail, exc.status_code, getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        fields = ", ".join(str(err["loc"][-1]) for err in exc.errors())
        return _message(f"Invalid request parameter: {fields}", 400)

    @app.exception_handler(HNFollowError)
    async def unhandled_domain_error(request: Request, exc: HNFollowError):
        log.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return _message(str(exc) or "Unknown error occurred", 500)

    app.include_router(following.router)
    app.include_router(catalog.router)

    # Health check
    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
