from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./hn_follow.db"

    # Server
    SERVICE_PORT: int = 8787
    LOG_LEVEL: str = "INFO"

    # Hacker News
    HN_API_URL: str = "https://hacker-news.firebaseio.com/v0"
    ALGOLIA_API_URL: str = "https://hn.algolia.com/api/v1"
    HN_ITEM_URL: str = "https://news.ycombinator.com/item"

    # Followed-item store ("sql" or "memory")
    STORE_BACKEND: str = "sql"
    STORE_KEY_PREFIX: str = "hn_"

    # Outbound HTTP
    HTTP_TIMEOUT: float = 30.0
    USER_AGENT: str = "HNFollow/1.0 (comment notifications)"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
