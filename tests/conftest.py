"""Shared fixtures: an in-memory Keep API behind httpx.MockTransport."""

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from keep_provider.client import KeepClient

ARTIFACTS_DIR = Path(__file__).parent / "artifacts"

Handler = Callable[[httpx.Request], httpx.Response]


def load_artifact(name: str) -> Any:
    """Load a JSON response captured from a Keep API."""
    with open(ARTIFACTS_DIR / name) as f:
        return json.load(f)


class FakeKeepAPI:
    """Routes (method, path) pairs to canned responses and records every call.

    Unregistered routes answer 404. A route may be a callable receiving the
    request, for stateful endpoints.
    """

    def __init__(self):
        self.calls: list[tuple[str, str, Any]] = []
        self._routes: dict[tuple[str, str], Handler] = {}

    def add(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        status: int = 200,
        text: str | None = None,
    ) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, json=json_body)

        self._routes[(method, path)] = respond

    def add_handler(self, method: str, path: str, handler: Handler) -> None:
        self._routes[(method, path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.calls.append((request.method, request.url.path, body))

        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        return route(request)

    def methods(self) -> list[tuple[str, str]]:
        return [(method, path) for method, path, _ in self.calls]

    def body_of(self, method: str, path: str) -> Any:
        for call_method, call_path, body in reversed(self.calls):
            if (call_method, call_path) == (method, path):
                return body
        raise AssertionError(f"no {method} {path} call recorded")


@pytest.fixture
def fake_api() -> FakeKeepAPI:
    return FakeKeepAPI()


@pytest.fixture
def transport(fake_api: FakeKeepAPI) -> httpx.MockTransport:
    return httpx.MockTransport(fake_api.handle)


@pytest.fixture
def client(transport: httpx.MockTransport):
    """KeepClient wired to the fake API."""
    keep_client = KeepClient(
        api_url="http://keep.test", api_key="test-key", transport=transport
    )
    yield keep_client
    keep_client.close()
