from __future__ import annotations

from urllib.parse import urlparse

import httpx

from vaxbot.config import Settings


def build_headers(settings: Settings) -> dict[str, str]:
    return {
        "authority": urlparse(settings.base_url).netloc,
        "user-agent": settings.user_agent,
        "accept": "text/json",
    }


def new_client(settings: Settings | None = None, *, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    # One client per run: shared connection pool and identity headers.
    # Library-default timeout, no retries.
    settings = settings or Settings()
    return httpx.Client(headers=build_headers(settings), transport=transport)
