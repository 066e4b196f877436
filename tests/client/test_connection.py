"""Tests for Connection."""

import threading
import time

import httpx
import pytest

from masto_tools.client.connection import Connection
from masto_tools.client.endpoints import V1
from masto_tools.client.streaming import Event


@pytest.fixture
def connection(instance):
    """Create a connection to the test instance."""
    c = Connection(instance)
    yield c
    c.close()


class TestResolveUri:
    """Tests for resolve_uri()."""

    def test_endpoint(self, connection):
        """Test endpoint members are prefixed with the base URI."""
        assert connection.resolve_uri(V1.INSTANCE) == "https://example.com/api/v1/instance"

    def test_relative_path(self, connection):
        """Test relative paths are prefixed with the base URI."""
        assert connection.resolve_uri("/api/v1/custom") == "https://example.com/api/v1/custom"

    def test_absolute_uri(self, connection):
        """Test absolute URIs are used as they are."""
        assert connection.resolve_uri("https://other.example/x") == "https://other.example/x"

    def test_not_a_path(self, connection):
        """Test other types are rejected."""
        with pytest.raises(TypeError):
            connection.resolve_uri(42)


class TestCalls:
    """Tests for the HTTP method helpers."""

    def test_get_with_placeholder(self, connection, recorder):
        """Test a GET with a placeholder and query parameters."""
        recorder.routes["/api/v1/accounts/12/followers"] = (200, "[]")
        answer = connection.get(V1.ACCOUNTS_ID_FOLLOWERS, {"id": "12", "limit": "10"})
        assert answer
        assert str(recorder.last.url) == "https://example.com/api/v1/accounts/12/followers?limit=10"

    def test_token_from_instance(self, connection, recorder):
        """Test the instance's token is used."""
        recorder.routes["/api/v1/accounts/verify_credentials"] = (200, "{}")
        connection.get(V1.ACCOUNTS_VERIFY_CREDENTIALS)
        assert recorder.last.headers["Authorization"] == "Bearer test-token"

    @pytest.mark.parametrize("method", ["post", "patch", "put", "delete"])
    def test_methods(self, connection, recorder, method):
        """Test each helper uses its HTTP method."""
        recorder.routes["/api/v1/statuses/5"] = (200, "{}")
        answer = getattr(connection, method)(V1.STATUSES_ID, {"id": "5"})
        assert answer
        assert recorder.last.method == method.upper()

    def test_later_instance_changes_not_applied(self, instance, recorder):
        """Test a connection keeps the settings it was created with."""
        recorder.routes["/api/v1/instance"] = (200, "{}")
        connection = Connection(instance)
        try:
            instance.set_useragent("changed/1.0")
            connection.get(V1.INSTANCE)
            assert recorder.last.headers["User-Agent"] != "changed/1.0"
        finally:
            connection.close()

    def test_copy(self, connection):
        """Test a copy is a Connection to the same instance."""
        other = connection.copy()
        try:
            assert isinstance(other, Connection)
            assert other.instance is connection.instance
            assert other.access_token == "test-token"
        finally:
            other.close()


class SlowStream(httpx.SyncByteStream):
    """Streams chunks until cancelled, pausing between them."""

    def __init__(self, chunks):
        self.chunks = chunks

    def __iter__(self):
        for chunk in self.chunks:
            yield chunk.encode()
            time.sleep(0.05)
        while True:
            yield b":thump\n"
            time.sleep(0.05)


class TestDrain:
    """Tests for draining the body of a running stream."""

    def test_drain_raw(self, connection, recorder):
        """Test raw draining after a finished request."""
        recorder.routes["/api/v1/instance"] = (200, "body")
        connection.get(V1.INSTANCE)
        assert connection.drain_raw() == "body"
        assert connection.drain_raw() == ""

    def test_drain_events_keeps_partial_record(self, connection):
        """Test an incomplete record is completed by later data."""
        connection.restore_body("event: update\ndata: 1\n\nevent: delete\nda")
        assert connection.drain_events() == [Event("update", "1")]

        with connection.buffer_lock:
            connection._body_buffer += "ta: 2\n\n"
        assert connection.drain_events() == [Event("delete", "2")]
        assert connection.drain_events() == []

    def test_stream_in_thread(self, connection, recorder):
        """Test events can be drained while the request is running."""
        recorder.routes["/api/v1/streaming/public"] = lambda request: httpx.Response(
            200,
            stream=SlowStream(["event: update\ndata: 1\n", "\nevent: delete\ndata: 2\n\n"]),
        )
        result = {}

        def run():
            result["answer"] = connection.get(V1.STREAMING_PUBLIC)

        thread = threading.Thread(target=run)
        thread.start()

        events = []
        deadline = time.monotonic() + 5
        while len(events) < 2 and time.monotonic() < deadline:
            time.sleep(0.02)
            events.extend(connection.drain_events())

        connection.cancel_stream()
        thread.join(5)

        assert not thread.is_alive()
        assert events == [Event("update", "1"), Event("delete", "2")]
        assert result["answer"].http_status == 200
        assert result["answer"]
