"""HTTP transport session built on httpx.

A :class:`TransportSession` owns one ``httpx.Client`` plus the buffers the
response is written into. Every transfer is streamed: headers are recorded
as soon as the response starts and body chunks are appended to a locked
buffer as they arrive, so a long-lived streaming request can be drained from
another thread while it is still running.
"""

import copy
import logging
import ssl
import threading
import weakref

import httpx
from httpx_auth import HeaderApiKey

from . import params
from .answer import Answer
from .exceptions import MastoConfigurationError, TransportErrorCode
from .lifecycle import TransportLibrary
from .params import ParameterMap

logger = logging.getLogger("masto-tools")

HTTP_METHODS = frozenset({"GET", "POST", "PATCH", "PUT", "DELETE"})

MAX_REDIRECTS = 10

# Same as libcurl's default connect timeout. Transfers themselves never time out.
CONNECT_TIMEOUT = 300.0


def _default_useragent() -> str:
    from masto_tools import __version__

    return f"masto-tools/{__version__}"


def transport_error_code(exception: httpx.HTTPError) -> TransportErrorCode:
    """Map an httpx exception to a transport error code.

    Args:
        exception: The exception raised by httpx

    Returns:
        The closest libcurl-style error code
    """
    if isinstance(exception, httpx.TooManyRedirects):
        return TransportErrorCode.TOO_MANY_REDIRECTS
    if isinstance(exception, httpx.UnsupportedProtocol):
        return TransportErrorCode.UNSUPPORTED_PROTOCOL
    if isinstance(exception, httpx.ProxyError):
        return TransportErrorCode.COULDNT_RESOLVE_PROXY
    if isinstance(exception, httpx.TimeoutException):
        return TransportErrorCode.OPERATION_TIMEDOUT
    if isinstance(exception, httpx.ConnectError):
        message = str(exception).lower()
        if "certificate" in message:
            return TransportErrorCode.PEER_FAILED_VERIFICATION
        if "ssl" in message or "tls" in message:
            return TransportErrorCode.SSL_CONNECT_ERROR
        if any(s in message for s in ("name or service", "getaddrinfo", "nodename", "name resolution")):
            return TransportErrorCode.COULDNT_RESOLVE_HOST
        return TransportErrorCode.COULDNT_CONNECT
    if isinstance(exception, httpx.WriteError):
        return TransportErrorCode.SEND_ERROR
    if isinstance(exception, httpx.ReadError):
        return TransportErrorCode.RECV_ERROR
    if isinstance(exception, httpx.ProtocolError):
        return TransportErrorCode.WEIRD_SERVER_REPLY
    if isinstance(exception, httpx.DecodingError):
        return TransportErrorCode.BAD_CONTENT_ENCODING
    return TransportErrorCode.RECV_ERROR


def format_headers(response: httpx.Response) -> str:
    """Render the status line and headers as a raw text block."""
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}"]
    lines.extend(
        f"{name.decode('latin-1')}: {value.decode('latin-1')}"
        for name, value in response.headers.raw
    )
    return "\n".join(lines) + "\n"


class _AbortedByCallback(Exception):
    """Raised by the progress check to stop a cancelled transfer."""


class _ClientHandle:
    """Holds the current httpx.Client of a session."""

    def __init__(self):
        self.client: httpx.Client | None = None


def _release(library: TransportLibrary, handle: _ClientHandle) -> None:
    if handle.client is not None:
        handle.client.close()
        handle.client = None
    library.release()


class TransportSession:
    """One HTTP connection handle with its configuration and response buffers.

    Only one request may be in flight per session. The body buffer is
    guarded by ``buffer_lock`` because a streaming request writes into it
    while another thread drains it.

    Usage:
        with TransportSession() as session:
            answer = session.make_request("GET", "https://example.com/api/v1/instance")

    Copying a session (``copy.copy``) creates a new session with the same
    configuration and its own ``httpx.Client``.
    """

    def __init__(self, transport: httpx.BaseTransport | None = None):
        """Initialize transport session.

        Args:
            transport: Optional httpx transport (for testing or advanced use).
        """
        self._library = TransportLibrary()
        self._library.acquire()

        # Released on close() or when the session is garbage collected.
        # The finalizer must not reference self.
        self._handle = _ClientHandle()
        self._finalizer = weakref.finalize(self, _release, self._library, self._handle)

        self._transport = transport
        self._proxy = ""
        self._access_token = ""
        self._cainfo = ""
        self._useragent = _default_useragent()

        self.buffer_lock = threading.Lock()
        self._body_buffer = ""
        self._header_buffer = ""
        self._stream_cancelled = False

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize the HTTP client from the current configuration."""
        if self._handle.client is None:
            self._handle.client = self._build_client()
        return self._handle.client

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    @property
    def proxy(self) -> str:
        return self._proxy

    @property
    def access_token(self) -> str:
        return self._access_token

    @property
    def cainfo(self) -> str:
        return self._cainfo

    @property
    def useragent(self) -> str:
        return self._useragent

    def __enter__(self) -> "TransportSession":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close session."""
        self.close()

    def __copy__(self) -> "TransportSession":
        other = TransportSession(transport=self._transport)
        self.copy_configuration_to(other)
        return other

    def close(self) -> None:
        """Close the HTTP client and release the transport. Safe to call twice."""
        self._finalizer()

    def copy(self) -> "TransportSession":
        """Return a new session with this session's configuration."""
        return copy.copy(self)

    def copy_configuration_to(self, other: "TransportSession") -> None:
        """Apply this session's non-empty settings to *other*."""
        other.setup_connection_properties(
            proxy=self._proxy,
            access_token=self._access_token,
            cainfo=self._cainfo,
            useragent=self._useragent,
        )

    def setup_connection_properties(
        self,
        proxy: str = "",
        access_token: str = "",
        cainfo: str = "",
        useragent: str = "",
    ) -> None:
        """Set every non-empty property in one go.

        Raises:
            MastoConfigurationError: If the new settings are rejected. The
                previous settings stay in effect.
        """
        changes = {
            "_proxy": proxy,
            "_access_token": access_token,
            "_cainfo": cainfo,
            "_useragent": useragent,
        }
        self._apply_settings({name: value for name, value in changes.items() if value})

    def set_proxy(self, proxy: str) -> None:
        """Set the proxy, e.g. ``"socks5://127.0.0.1:9050"`` or ``"http://[::1]:3128"``."""
        self._apply_settings({"_proxy": proxy})
        logger.debug(f"Set proxy to: {proxy}")

    def set_access_token(self, access_token: str) -> None:
        """Set the OAuth 2.0 bearer token sent with every request."""
        self._apply_settings({"_access_token": access_token})
        logger.debug("Set authorization token.")

    def set_cainfo(self, path: str) -> None:
        """Use the CA bundle at *path* to verify servers."""
        self._apply_settings({"_cainfo": path})

    def set_useragent(self, useragent: str) -> None:
        """Set the User-Agent header."""
        self._apply_settings({"_useragent": useragent})
        logger.debug(f"Set User-Agent to: {useragent}")

    def cancel_stream(self) -> None:
        """Cancel the running transfer.

        Can be called from any thread. The transfer stops at the next
        progress check, after the next chunk arrives, and its answer is
        returned normally.
        """
        self._stream_cancelled = True

    def take_body(self) -> str:
        """Swap out the body buffer and return its contents."""
        with self.buffer_lock:
            body, self._body_buffer = self._body_buffer, ""
        return body

    def restore_body(self, rest: str) -> None:
        """Put unconsumed data back in front of anything received since."""
        if not rest:
            return
        with self.buffer_lock:
            self._body_buffer = rest + self._body_buffer

    def make_request(
        self,
        method: str,
        uri: str,
        parameters: ParameterMap | None = None,
    ) -> Answer:
        """Make an HTTP request.

        GET parameters are appended to the URI as a query string; other
        methods send them as a multipart form. Placeholders in *uri* are
        replaced first.

        Args:
            method: GET, POST, PATCH, PUT or DELETE
            uri: Full URI, may contain placeholders like ``<ID>``
            parameters: Optional parameters

        Returns:
            Answer with the transport error or the HTTP response

        Raises:
            MastoConfigurationError: If the transfer cannot be set up
        """
        method = method.upper()
        if method not in HTTP_METHODS:
            raise MastoConfigurationError(f"Unsupported HTTP method: {method}")

        self._stream_cancelled = False
        self._header_buffer = ""
        with self.buffer_lock:
            self._body_buffer = ""

        files = None
        uri, remaining = params.apply(uri, parameters)
        if method == "GET":
            uri += params.build_query(remaining)
        elif remaining:
            files = params.to_httpx_files(params.build_form(remaining))

        logger.debug(f"Making request to: {uri}")
        try:
            request = self.client.build_request(method, uri, files=files)
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            raise MastoConfigurationError("Failed to set URI", error_buffer=str(e)) from e

        return self._perform(request)

    def _perform(self, request: httpx.Request) -> Answer:
        try:
            response = self.client.send(request, stream=True)
        except httpx.HTTPError as e:
            return self._finish(transport_error_code(e), str(e))

        code = TransportErrorCode.OK
        message = ""
        try:
            self._header_buffer = format_headers(response)
            for chunk in response.iter_text():
                with self.buffer_lock:
                    self._body_buffer += chunk
                self._progress()
        except _AbortedByCallback:
            code = TransportErrorCode.ABORTED_BY_CALLBACK
            message = "Operation was aborted by an application callback"
        except httpx.HTTPError as e:
            code = transport_error_code(e)
            message = str(e)
        finally:
            response.close()

        return self._finish(code, message, response)

    def _progress(self) -> None:
        if self._stream_cancelled:
            raise _AbortedByCallback()

    def _finish(
        self,
        code: TransportErrorCode,
        message: str,
        response: httpx.Response | None = None,
    ) -> Answer:
        """Turn the outcome of a transfer into an Answer.

        A transfer aborted because of :meth:`cancel_stream` counts as a
        normal response; any other transport error leaves the status at 0.
        """
        if response is not None and (
            code == TransportErrorCode.OK
            or (code == TransportErrorCode.ABORTED_BY_CALLBACK and self._stream_cancelled)
        ):
            logger.debug(f"HTTP status code: {response.status_code}")
            with self.buffer_lock:
                body = self._body_buffer
            return Answer(
                http_status=response.status_code,
                headers=self._header_buffer,
                body=body,
            )

        logger.debug(f"Transport error: {int(code)}")
        logger.debug(message)
        return Answer(transport_error_code=int(code), error_message=message)

    def _apply_settings(self, settings: dict[str, str]) -> None:
        previous = {name: getattr(self, name) for name in settings}
        for name, value in settings.items():
            setattr(self, name, value)
        try:
            self._reconfigure()
        except MastoConfigurationError:
            for name, value in previous.items():
                setattr(self, name, value)
            raise

    def _reconfigure(self) -> None:
        # The old client stays in use until the new one could be built.
        client = self._build_client()
        old, self._handle.client = self._handle.client, client
        if old is not None:
            old.close()

    def _build_client(self) -> httpx.Client:
        if self.closed:
            raise MastoConfigurationError(
                "Session is closed.", error_code=TransportErrorCode.FAILED_INIT
            )

        try:
            if self._cainfo:
                verify = ssl.create_default_context(cafile=self._cainfo)
            else:
                verify = self._library.default_ssl_context()
        except (OSError, ssl.SSLError) as e:
            raise MastoConfigurationError("Could not set CA info.", error_buffer=str(e)) from e

        auth = None
        if self._access_token:
            auth = HeaderApiKey(
                api_key=f"Bearer {self._access_token}",
                header_name="Authorization",
            )

        try:
            return httpx.Client(
                auth=auth,
                proxy=self._proxy or None,
                verify=verify,
                headers={"User-Agent": self._useragent},
                follow_redirects=True,
                max_redirects=MAX_REDIRECTS,
                timeout=httpx.Timeout(None, connect=CONNECT_TIMEOUT),
                transport=self._transport,
            )
        except (httpx.InvalidURL, ValueError, TypeError, ImportError) as e:
            raise MastoConfigurationError("Failed to set proxy", error_buffer=str(e)) from e
