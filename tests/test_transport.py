import asyncio
from unittest.mock import patch

import aiohttp
import httpx
import pytest

from weatherflow.errors import HttpStatusError, TransportTimeout, Unreachable
from weatherflow.transport import AiohttpTransport, HttpxTransport

URL = "https://api.openweathermap.org/data/2.5/weather?q=london&appid=test-key&units=metric"


class MockAsyncClient:
    def __init__(self, response=None, error=None):
        self._response = response
        self._error = error
        self.calls = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def get(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        if self._error is not None:
            raise self._error
        return self._response


def _response(status_code, content=b'{"ok": true}'):
    return httpx.Response(
        status_code=status_code,
        content=content,
        request=httpx.Request("GET", URL),
    )


@pytest.mark.asyncio
async def test_httpx_returns_body_and_passes_timeout():
    client = MockAsyncClient(_response(200))
    transport = HttpxTransport(client=client)

    body = await transport.fetch(URL, 7)

    assert body == b'{"ok": true}'
    assert client.calls == [((URL,), {"timeout": 7})]


@pytest.mark.asyncio
async def test_httpx_without_client_opens_short_lived_one():
    client = MockAsyncClient(_response(200))
    with patch("httpx.AsyncClient", lambda *args, **kwargs: client):
        body = await HttpxTransport().fetch(URL, 5)
    assert body == b'{"ok": true}'


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [401, 404, 500])
async def test_httpx_non_2xx_raises_status_error(status):
    transport = HttpxTransport(client=MockAsyncClient(_response(status, b"{}")))
    with pytest.raises(HttpStatusError) as excinfo:
        await transport.fetch(URL, 5)
    assert excinfo.value.status == status


@pytest.mark.asyncio
async def test_httpx_timeout_maps_to_transport_timeout():
    error = httpx.ReadTimeout("timed out", request=httpx.Request("GET", URL))
    transport = HttpxTransport(client=MockAsyncClient(error=error))
    with pytest.raises(TransportTimeout):
        await transport.fetch(URL, 5)


@pytest.mark.asyncio
async def test_httpx_connect_error_maps_to_unreachable():
    error = httpx.ConnectError("name resolution failed", request=httpx.Request("GET", URL))
    transport = HttpxTransport(client=MockAsyncClient(error=error))
    with pytest.raises(Unreachable):
        await transport.fetch(URL, 5)


@pytest.mark.asyncio
async def test_httpx_other_errors_propagate_unchanged():
    transport = HttpxTransport(client=MockAsyncClient(error=RuntimeError("boom")))
    with pytest.raises(RuntimeError):
        await transport.fetch(URL, 5)


class FakeAiohttpResponse:
    def __init__(self, status, body=b"{}", error=None):
        self.status = status
        self._body = body
        self._error = error

    async def __aenter__(self):
        if self._error is not None:
            raise self._error
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def read(self):
        return self._body

    async def text(self):
        return self._body.decode()


class FakeSession:
    def __init__(self, response):
        self._response = response
        self.closed = False
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        return self._response

    async def close(self):
        self.closed = True


@pytest.mark.asyncio
async def test_aiohttp_returns_body_with_total_timeout():
    session = FakeSession(FakeAiohttpResponse(200, b'{"name": "London"}'))
    transport = AiohttpTransport(session=session)

    body = await transport.fetch(URL, 4)

    assert body == b'{"name": "London"}'
    url, timeout = session.calls[0]
    assert url == URL
    assert timeout.total == 4


@pytest.mark.asyncio
async def test_aiohttp_non_2xx_raises_status_error():
    transport = AiohttpTransport(session=FakeSession(FakeAiohttpResponse(404, b'{"message": "city not found"}')))
    with pytest.raises(HttpStatusError) as excinfo:
        await transport.fetch(URL, 4)
    assert excinfo.value.status == 404


@pytest.mark.asyncio
async def test_aiohttp_timeout_maps_to_transport_timeout():
    transport = AiohttpTransport(session=FakeSession(FakeAiohttpResponse(200, error=asyncio.TimeoutError())))
    with pytest.raises(TransportTimeout):
        await transport.fetch(URL, 4)


@pytest.mark.asyncio
async def test_aiohttp_connection_error_maps_to_unreachable():
    error = aiohttp.ClientConnectionError("connection refused")
    transport = AiohttpTransport(session=FakeSession(FakeAiohttpResponse(200, error=error)))
    with pytest.raises(Unreachable):
        await transport.fetch(URL, 4)


@pytest.mark.asyncio
async def test_aiohttp_close_leaves_injected_session_open():
    session = FakeSession(FakeAiohttpResponse(200))
    transport = AiohttpTransport(session=session)

    await transport.close()

    assert session.closed is False


@pytest.mark.asyncio
async def test_aiohttp_owned_session_created_lazily_and_closed():
    transport = AiohttpTransport()

    session = await transport.get_session()
    assert isinstance(session, aiohttp.ClientSession)
    assert await transport.get_session() is session

    await transport.close()
    assert session.closed
