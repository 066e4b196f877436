"""masto-tools - Client library and CLI for the Mastodon API."""

from masto_tools.client import Answer, Connection, Instance, ObtainToken
from masto_tools.client.config import MastoConfig
from masto_tools.client.endpoints import V1, V2, Admin, OAuth, Pleroma
from masto_tools.client.exceptions import (
    MastoConfigurationError,
    MastoError,
    TransportErrorCode,
)
from masto_tools.client.streaming import Event, EventType

try:
    from importlib.metadata import version
    __version__ = version("masto-tools")
except Exception:
    __version__ = "0.1.0"  # Fallback for development

__all__ = [
    "Admin",
    "Answer",
    "Connection",
    "Event",
    "EventType",
    "Instance",
    "MastoConfig",
    "MastoConfigurationError",
    "MastoError",
    "OAuth",
    "ObtainToken",
    "Pleroma",
    "TransportErrorCode",
    "V1",
    "V2",
    "__version__",
]
