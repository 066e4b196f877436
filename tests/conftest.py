"""Pytest configuration and fixtures."""

import httpx
import pytest

from masto_tools.client.config import MastoConfig
from masto_tools.client.instance import Instance
from masto_tools.client.lifecycle import TransportLibrary


@pytest.fixture(autouse=True)
def reset_transport_library():
    """Give every test a fresh transport singleton."""
    TransportLibrary._reset()
    yield
    TransportLibrary._reset()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep MASTO_* variables from the developer's shell out of tests."""
    for name in (
        "MASTO_HOSTNAME",
        "MASTO_ACCESS_TOKEN",
        "MASTO_PROXY",
        "MASTO_CAINFO",
        "MASTO_USERAGENT",
        "MASTO_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config():
    """Create a test config."""
    return MastoConfig(
        hostname="example.com",
        access_token="test-token",
    )


@pytest.fixture
def recorder():
    """Create a mock transport that records requests.

    ``recorder.routes`` maps a path to a ``(status, body)`` tuple or to a
    callable taking the request. Unknown paths answer 404.
    """

    class Recorder:
        def __init__(self):
            self.requests: list[httpx.Request] = []
            self.routes: dict = {}
            self.transport = httpx.MockTransport(self.handle)

        def handle(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            route = self.routes.get(request.url.path)
            if route is None:
                return httpx.Response(404, text='{"error":"Record not found"}')
            if callable(route):
                return route(request)
            status, body = route
            return httpx.Response(status, text=body)

        @property
        def last(self) -> httpx.Request:
            return self.requests[-1]

    return Recorder()


@pytest.fixture
def instance(recorder):
    """Create an Instance wired to the recording transport."""
    inst = Instance("example.com", "test-token", transport=recorder.transport)
    yield inst
    inst.close()
