"""Shared pooled HTTP client.

One httpx.AsyncClient serves every outbound call (LINE, Kagi, the RSS feed and
the OpenAI SDK). It is created lazily on first use and never mutated.
"""

import asyncio
from functools import lru_cache
from typing import Any

import httpx

from .config import get_settings
from .errors import TransportError
from .log import get_logger

logger = get_logger("http")


def is_transient_status(status: int) -> bool:
    return status == 429 or status >= 500


@lru_cache()
def get_http_client() -> httpx.AsyncClient:
    settings = get_settings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.HTTP_TIMEOUT, connect=settings.HTTP_CONNECT_TIMEOUT),
        limits=httpx.Limits(max_keepalive_connections=10, keepalive_expiry=90.0),
        follow_redirects=True,
        headers={"User-Agent": "DailyHNBot/1.0 (+https://github.com/daily-hn-bot)"},
    )


async def close_http_client():
    if get_http_client.cache_info().currsize:
        await get_http_client().aclose()
        get_http_client.cache_clear()


async def send(stage: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
    """
    Perform one request on the shared client.
    The whole request, body included, is bounded by HTTP_TIMEOUT.
    Network failures, timeouts and non-2xx statuses are raised as TransportError tagged
    with `stage`, marked transient for connection problems, timeouts, 429 and 5xx.
    """
    timeout = get_settings().HTTP_TIMEOUT
    try:
        resp = await asyncio.wait_for(get_http_client().request(method, url, **kwargs), timeout)
    except asyncio.TimeoutError as e:
        raise TransportError(f"request took longer than {timeout}s", stage=stage, transient=True) from e
    except httpx.TransportError as e:
        raise TransportError(f"{type(e).__name__}: {e}", stage=stage, transient=True) from e

    if not resp.is_success:
        logger.error(f"{stage}: upstream returned HTTP {resp.status_code}")
        raise TransportError(
            "upstream returned an error status",
            stage=stage,
            status=resp.status_code,
            transient=is_transient_status(resp.status_code),
        )
    return resp
