import json

import pytest

from webuntis_rpc.session import Session
from webuntis_rpc.transport import Transport, TransportResponse


class StubTransport(Transport):
    """Transport stub answering by JSON-RPC method name and recording every post."""

    def __init__(self, results=None, errors=None) -> None:
        self.results = dict(results or {})
        self.errors = dict(errors or {})
        self.calls = []
        self.closed = False

    def methods(self):
        return [json.loads(body)["method"] for _, body, _ in self.calls]

    async def post(self, url, body, headers):
        self.calls.append((url, body, headers))
        request = json.loads(body)
        method = request["method"]
        if method in self.errors:
            status, error = self.errors[method]
            payload = {"id": request["id"], "error": error, "jsonrpc": "2.0"}
            return TransportResponse(status, json.dumps(payload))

        result = self.results[method]
        if callable(result):
            result = result(request["params"])
        return TransportResponse(200, json.dumps({"id": request["id"], "result": result, "jsonrpc": "2.0"}))

    async def close(self):
        self.closed = True


@pytest.fixture
def transport():
    return StubTransport(results={
        "authenticate": {"sessionId": "ABC123", "personType": 5, "personId": 42, "klasseId": 7},
        "logout": None,
    })


@pytest.fixture
def session(transport):
    return Session.init_no_login("example.webuntis.com", "demo", "user", "secret", transport=transport)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self):
        return self.now
