"""Custom exceptions for the Mastodon API client.

Network and HTTP failures are never raised: they are reported through the
fields of :class:`~masto_tools.client.answer.Answer`. Only local setup
problems surface as exceptions.
"""

from enum import IntEnum


class TransportErrorCode(IntEnum):
    """Transport error codes, numbered like libcurl's CURLcode."""

    OK = 0
    UNSUPPORTED_PROTOCOL = 1
    FAILED_INIT = 2
    COULDNT_RESOLVE_PROXY = 5
    COULDNT_RESOLVE_HOST = 6
    COULDNT_CONNECT = 7
    WEIRD_SERVER_REPLY = 8
    READ_ERROR = 26
    OPERATION_TIMEDOUT = 28
    SSL_CONNECT_ERROR = 35
    ABORTED_BY_CALLBACK = 42
    TOO_MANY_REDIRECTS = 47
    SEND_ERROR = 55
    RECV_ERROR = 56
    PEER_FAILED_VERIFICATION = 60
    BAD_CONTENT_ENCODING = 61


class MastoError(Exception):
    """Base exception for all masto-tools errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class MastoConfigurationError(MastoError):
    """A transfer could not be configured.

    Raised when the transport cannot be initialized, an option such as the
    URI, proxy or CA bundle is rejected, or a multipart form cannot be built.
    Not expected to be retried.
    """

    def __init__(self, message: str, error_code: int = 0, error_buffer: str = ""):
        super().__init__(message)
        self.error_code = error_code
        self.error_buffer = error_buffer

    def __str__(self) -> str:
        text = "transport error: "
        if self.error_code:
            text += f"{int(self.error_code)} - "
        text += self.message
        if self.error_buffer:
            text += f" [{self.error_buffer}]"
        return text
