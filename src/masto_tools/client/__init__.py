"""Mastodon API client.

This package maps the Mastodon REST and streaming API onto typed calls.
Requests go through httpx; results are returned as :class:`Answer` objects
that carry transport errors and HTTP status instead of raising.

Usage:
    from masto_tools.client import Connection, Instance, V1

    instance = Instance("example.com", access_token)
    connection = Connection(instance)

    answer = connection.post(V1.STATUSES, {"status": "Hello world"})
    if not answer:
        print(answer.transport_error_code, answer.http_status)

Only local misconfiguration (invalid URI, proxy or CA bundle, unreadable
upload) raises, as :class:`MastoConfigurationError`.
"""

from .answer import Answer
from .config import MastoConfig
from .connection import Connection
from .endpoints import V1, V2, Admin, Endpoint, OAuth, Pleroma, resolve
from .exceptions import MastoConfigurationError, MastoError, TransportErrorCode
from .helpers import unescape_html
from .http import TransportSession
from .instance import Instance, ObtainToken
from .params import ParameterMap
from .streaming import Event, EventType

__all__ = [
    # Main API
    "Connection",
    "Instance",
    "ObtainToken",
    "MastoConfig",
    # Requests and results
    "Answer",
    "ParameterMap",
    "TransportSession",
    # Endpoints
    "Admin",
    "Endpoint",
    "OAuth",
    "Pleroma",
    "V1",
    "V2",
    "resolve",
    # Streaming
    "Event",
    "EventType",
    # Exceptions
    "MastoConfigurationError",
    "MastoError",
    "TransportErrorCode",
    # Helpers
    "unescape_html",
]
