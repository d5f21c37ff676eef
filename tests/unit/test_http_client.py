import asyncio
from unittest.mock import patch

import httpx
import pytest

from daily_hn_bot.config import get_settings
from daily_hn_bot.errors import TransportError
from daily_hn_bot.http_client import is_transient_status, send


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_send_success():
    """
    WHY: 2xx responses are handed back untouched.
    HOW: Mock transport answering 200.
    EXPECTED: The response is returned.
    """
    client = _client(lambda request: httpx.Response(200, json={"ok": True}))
    with patch("daily_hn_bot.http_client.get_http_client", return_value=client):
        resp = await send("test", "GET", "https://example.com/")
    assert resp.json() == {"ok": True}


@pytest.mark.asyncio
@pytest.mark.parametrize("status,transient", [(500, True), (503, True), (429, True), (400, False), (401, False)])
async def test_send_error_status(status, transient):
    """
    WHY: The retry executor relies on the transient flag; the log relies on stage and status.
    HOW: Mock transport answering with an error status.
    EXPECTED: TransportError carrying stage, status and the right transient flag.
    """
    client = _client(lambda request: httpx.Response(status, text="nope"))
    with patch("daily_hn_bot.http_client.get_http_client", return_value=client):
        with pytest.raises(TransportError) as exc:
            await send("line.push", "POST", "https://example.com/")

    assert exc.value.stage == "line.push"
    assert exc.value.status == status
    assert exc.value.transient is transient
    assert f"HTTP {status}" in str(exc.value)


@pytest.mark.asyncio
async def test_send_connection_failure_is_transient():
    """
    WHY: A refused connection is the textbook transient failure.
    HOW: Mock transport raising httpx.ConnectError.
    EXPECTED: TransportError with transient=True and no status.
    """
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with patch("daily_hn_bot.http_client.get_http_client", return_value=_client(handler)):
        with pytest.raises(TransportError) as exc:
            await send("rss", "GET", "https://example.com/")

    assert exc.value.transient is True
    assert exc.value.status is None


def test_is_transient_status():
    assert is_transient_status(429)
    assert is_transient_status(500)
    assert not is_transient_status(404)


@pytest.mark.asyncio
async def test_send_bounds_the_whole_request(monkeypatch):
    """
    WHY: A server that keeps trickling data never trips httpx's per-read timeout; HTTP_TIMEOUT caps the whole call.
    HOW: Mock transport that answers only after 1s, with HTTP_TIMEOUT set to 0.05s.
    EXPECTED: A transient TransportError with no status, raised well before the response.
    """
    async def slow(request):
        await asyncio.sleep(1)
        return httpx.Response(200)

    monkeypatch.setattr(get_settings(), "HTTP_TIMEOUT", 0.05)
    with patch("daily_hn_bot.http_client.get_http_client", return_value=_client(slow)):
        with pytest.raises(TransportError) as exc:
            await send("kagi.summarize", "POST", "https://example.com/")

    assert exc.value.transient is True
    assert exc.value.status is None
    assert exc.value.stage == "kagi.summarize"
