"""Normalized result of one request."""

import logging
import string
from dataclasses import dataclass

from .params import ParameterMap

logger = logging.getLogger("masto-tools")

# Header names are compared case-insensitively for A-Z only.
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


@dataclass(frozen=True)
class Answer:
    """Outcome of one request.

    Transport failures (DNS, connection refused, TLS, aborted transfer) set
    ``transport_error_code`` and leave ``http_status`` at 0. HTTP errors are
    ordinary answers with a non-200 status; headers and body are still filled.

    Attributes:
        transport_error_code: libcurl-style error code, 0 if the transfer worked.
        error_message: Human-readable transport error.
        http_status: HTTP status code, 0 if no status was received.
        headers: Raw response headers, one ``Name: value`` per line.
        body: Raw response body, usually JSON.
    """

    transport_error_code: int = 0
    error_message: str = ""
    http_status: int = 0
    headers: str = ""
    body: str = ""

    def __bool__(self) -> bool:
        return self.transport_error_code == 0 and self.http_status == 200

    def __str__(self) -> str:
        return self.body

    def get_header(self, field: str) -> str:
        """Return the value of a header field.

        Args:
            field: Header name, matched case-insensitively (ASCII only).

        Returns:
            The value up to the end of the line, or an empty string.
        """
        wanted = field.translate(_ASCII_LOWER)
        for line in self.headers.splitlines():
            name, sep, value = line.partition(":")
            if sep and name.strip().translate(_ASCII_LOWER) == wanted:
                return value.strip()
        return ""

    def next(self) -> ParameterMap:
        """Parameters needed to fetch the next page, parsed from ``Link``."""
        return self._parse_pagination("next")

    def prev(self) -> ParameterMap:
        """Parameters needed to fetch the previous page, parsed from ``Link``."""
        return self._parse_pagination("prev")

    def _parse_pagination(self, direction: str) -> ParameterMap:
        link = self.get_header("Link")
        if not link:
            return {}

        for entry in link.split(","):
            if f'rel="{direction}"' not in entry:
                continue
            start = entry.find("<")
            end = entry.find(">", start)
            if start == -1 or end == -1:
                return {}
            uri = entry[start + 1:end]
            query = uri.partition("?")[2]
            logger.debug(f"Found parameters in Link header: {query}")

            parameters: ParameterMap = {}
            for pair in query.split("&"):
                name, sep, value = pair.partition("=")
                if sep:
                    parameters[name] = value
            return parameters

        return {}
