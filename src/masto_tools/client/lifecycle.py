"""Process-wide transport initialization.

The first :class:`~masto_tools.client.http.TransportSession` initializes
shared transport state, the last one to close tears it down. Sessions can
be created and closed from different threads, so the reference count is
only touched under a lock.
"""

import logging
import ssl
import threading

import httpx

logger = logging.getLogger("masto-tools")


class TransportLibrary:
    """Thread-safe singleton holding the reference-counted transport state."""

    _instance: "TransportLibrary | None" = None
    _lock = threading.Lock()

    def __new__(cls) -> "TransportLibrary":
        """Ensure singleton via __new__."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super().__new__(cls)
                    instance._count = 0
                    instance._ssl_context = None
                    cls._instance = instance
        return cls._instance

    @property
    def count(self) -> int:
        """Number of live sessions."""
        return self._count

    def acquire(self) -> None:
        """Register a new session, initializing on the 0 -> 1 transition."""
        with TransportLibrary._lock:
            if self._count == 0:
                self._init()
            self._count += 1
            logger.debug(f"Transport sessions: {self._count} (+1)")

    def release(self) -> None:
        """Unregister a session, tearing down on the 1 -> 0 transition."""
        with TransportLibrary._lock:
            if self._count == 0:
                return
            self._count -= 1
            logger.debug(f"Transport sessions: {self._count} (-1)")
            if self._count == 0:
                self._teardown()

    def default_ssl_context(self) -> ssl.SSLContext:
        """SSL context with httpx's default CA bundle, shared by all sessions."""
        with TransportLibrary._lock:
            if self._ssl_context is None:
                self._ssl_context = httpx.create_ssl_context()
            return self._ssl_context

    def _init(self) -> None:
        self._ssl_context = httpx.create_ssl_context()
        logger.debug("Initialized transport.")

    def _teardown(self) -> None:
        self._ssl_context = None
        logger.debug("Cleaned up transport.")

    @classmethod
    def _reset(cls) -> None:
        """Reset singleton for testing. Do not use in production."""
        with cls._lock:
            cls._instance = None
