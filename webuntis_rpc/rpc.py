from typing import Any
import json
import logging

from .cache import ResponseCache
from .errors import RpcError, error_from_response
from .transport import Transport, TransportResponse

DEFAULT_PATH = "/WebUntis/jsonrpc.do"


def cache_key(envelope: dict[str, Any]) -> str:
    """Canonical form of a request. The request id is left out, otherwise no two calls would ever share a key"""
    return json.dumps({k: v for k, v in envelope.items() if k != "id"}, sort_keys=True, separators=(",", ":"))


class RpcClient:
    """JSON-RPC 2.0 pipeline: envelope, cache lookup, network call, error decoding"""

    def __init__(self, server: str, school: str, transport: Transport, path: str = DEFAULT_PATH,
                 cache: ResponseCache | None = None):
        self._logger = logging.getLogger(__name__)
        self.url = f"https://{server}{path}?school={school}"
        self.transport = transport
        self.cache = cache if cache is not None else ResponseCache()
        self.session_id: str | None = None
        self._request_id = 0

    def postify(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        self._request_id += 1
        return {
            "id": f"req-{self._request_id}",
            "method": method,
            "params": params,
            "jsonrpc": "2.0"
        }

    async def call(self, method: str, params: dict[str, Any] | None = None, use_cache: bool = False) -> Any:
        envelope = self.postify(method, params or {})
        key = cache_key(envelope)

        # An expired entry is dropped by the lookup, so this falls through to a single fetch
        response: TransportResponse | None = self.cache.get(key) if use_cache else None
        from_cache = response is not None
        if from_cache:
            self._logger.debug(f"[Cache] Hit for {method}")
        else:
            self._logger.debug(f"[Request] {envelope['id']} {method}")
            headers = {"Cookie": f"JSESSIONID={self.session_id}"} if self.session_id else {}
            response = await self.transport.post(self.url, json.dumps(envelope), headers)

        result = self._decode(method, response)
        if use_cache and not from_cache:
            self.cache.put(key, response)

        return result

    def _decode(self, method: str, response: TransportResponse) -> Any:
        try:
            body = json.loads(response.body)
        except ValueError:
            body = None

        if not isinstance(body, dict):
            self._logger.error(f"[Request] {method} returned a non JSON-RPC body (status {response.status})")
            raise RpcError(None, response.status)

        if response.status != 200 or "error" in body:
            error = body.get("error")
            self._logger.error(f"[Request] {method} failed with {error}")
            raise error_from_response(error, response.status)

        return body.get("result")
