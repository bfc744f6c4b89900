"""HN Follow entry point."""

from __future__ import annotations

import logging

import uvicorn

from api.app import create_app
from clients.algolia import AlgoliaClient
from clients.base import build_http_client
from clients.hn import HNClient
from config.settings import settings
from data.database import async_session_factory, init_db
from data.kv import build_kv_store

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
log = logging.getLogger(__name__)

app = create_app()


@app.on_event("startup")
async def on_startup() -> None:
    log.info("Initialising database…")
    await init_db()

    http = build_http_client()
    app.state.http_client = http
    app.state.session_factory = async_session_factory
    app.state.kv = build_kv_store(settings.STORE_BACKEND, async_session_factory)
    app.state.hn_client = HNClient(http)
    app.state.algolia_client = AlgoliaClient(http)
    log.info("Ready (store backend: %s)", settings.STORE_BACKEND)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    if hasattr(app.state, "http_client"):
        await app.state.http_client.aclose()
        log.info("HTTP client closed.")


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.SERVICE_PORT,
        reload=False,
    )
