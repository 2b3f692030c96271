import asyncio

import aiohttp
import pytest

from webuntis_rpc.errors import TransportError
from webuntis_rpc.transport import AiohttpTransport, TransportResponse


class _StubResponse:
    def __init__(self, status, text) -> None:
        self.status = status
        self._text = text

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def text(self):
        return self._text


class _StubClientSession:
    """Minimal aiohttp.ClientSession stub capturing ``post`` arguments."""

    def __init__(self, response=None, error=None) -> None:
        self.response = response
        self.error = error
        self.posts = []
        self.closed = False

    def post(self, url, data=None, headers=None):
        self.posts.append((url, data, headers))
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self):
        self.closed = True


def test_post_returns_status_and_body():
    transport = AiohttpTransport()
    stub = _StubClientSession(response=_StubResponse(200, '{"result": 1}'))
    transport._session = stub

    response = asyncio.run(transport.post("https://x/rpc", "{}", {"Cookie": "JSESSIONID=A"}))

    assert response == TransportResponse(200, '{"result": 1}')
    assert stub.posts == [("https://x/rpc", "{}", {"Content-Type": "application/json", "Cookie": "JSESSIONID=A"})]


def test_client_errors_are_wrapped():
    transport = AiohttpTransport()
    transport._session = _StubClientSession(error=aiohttp.ClientConnectionError("refused"))

    with pytest.raises(TransportError) as info:
        asyncio.run(transport.post("https://x/rpc", "{}", {}))
    assert isinstance(info.value.__cause__, aiohttp.ClientConnectionError)


def test_close_releases_session():
    transport = AiohttpTransport()
    stub = _StubClientSession()
    transport._session = stub

    asyncio.run(transport.close())
    assert stub.closed
    assert transport._session is None
