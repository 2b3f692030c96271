from abc import ABC, abstractmethod
from typing import NamedTuple
from aiohttp import ClientError, ClientSession, ClientTimeout, TCPConnector
import asyncio
import logging

from .errors import TransportError


class TransportResponse(NamedTuple):
    status: int
    body: str


class Transport(ABC):
    @abstractmethod
    async def post(self, url: str, body: str, headers: dict[str, str]) -> TransportResponse:
        """Send body to url, return the status and the undecoded response text"""

    async def close(self):
        """Release network resources"""


class AiohttpTransport(Transport):
    """
    aiohttp backed transport.\n
    Certificates are not verified, WebUntis test servers present self-signed ones
    """

    def __init__(self, timeout: ClientTimeout | None = None):
        self._logger = logging.getLogger(__name__)
        self._timeout = timeout
        self._session: ClientSession | None = None

    def _get_session(self) -> ClientSession:
        if self._session is None or self._session.closed:
            kwargs = {"connector": TCPConnector(ssl=False)}
            if self._timeout is not None:
                kwargs["timeout"] = self._timeout
            self._session = ClientSession(**kwargs)

        return self._session

    async def post(self, url: str, body: str, headers: dict[str, str]) -> TransportResponse:
        session = self._get_session()
        try:
            async with session.post(url, data=body, headers={"Content-Type": "application/json", **headers}) as resp:
                return TransportResponse(resp.status, await resp.text())
        except (ClientError, asyncio.TimeoutError) as e:
            self._logger.error(f"[Transport] POST {url} failed: {e!r}")
            raise TransportError(f"Failed to reach {url}") from e

    async def close(self):
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
