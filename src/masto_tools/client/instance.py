"""Instance access data and OAuth token acquisition.

An :class:`Instance` holds the hostname, access token and transport settings
of one server. Sessions created from it (:class:`~masto_tools.client.connection.Connection`,
:class:`ObtainToken`) copy these settings when they are constructed, so
configure the Instance first and create sessions afterwards.
"""

import logging
import re
from dataclasses import replace
from urllib.parse import quote

import httpx

from .answer import Answer
from .config import MastoConfig
from .endpoints import OAuth, V1, resolve
from .http import TransportSession

logger = logging.getLogger("masto-tools")

DEFAULT_MAX_CHARS = 500
DEFAULT_POST_FORMAT = "text/plain"
NODEINFO_DISCOVERY = "/.well-known/nodeinfo"

# Out-of-band redirect, the user copies the code from the browser.
REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"
DEFAULT_SCOPES = "read"


def _find_number(body: str, key: str) -> int | None:
    match = re.search(rf'["\']?{re.escape(key)}["\']?\s*:\s*["\']?(\d+)', body)
    return int(match.group(1)) if match else None


def _find_string(body: str, key: str) -> str:
    match = re.search(rf'["\']?{re.escape(key)}["\']?\s*:\s*"([^"]*)"', body)
    return match.group(1) if match else ""


class Instance:
    """Holds the access data of an instance.

    Usage:
        instance = Instance("example.com", access_token)
        instance.set_proxy("socks5://127.0.0.1:9050")
        connection = Connection(instance)

    Setters apply to the Instance and its own session only. Sessions created
    earlier keep their settings.
    """

    def __init__(
        self,
        hostname: str,
        access_token: str = "",
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize instance.

        Args:
            hostname: The hostname of the instance, e.g. "example.com".
            access_token: Your access token, empty for public endpoints.
            transport: Optional httpx transport, passed on to every session.
        """
        self._hostname = hostname
        self._baseuri = "https://" + hostname
        self._access_token = access_token
        self._proxy = ""
        self._cainfo = ""
        self._useragent = ""
        self._max_chars = 0
        self._post_formats: list[str] = []
        self._transport = transport

        self._session = TransportSession(transport=transport)
        self.copy_connection_properties(self._session)

    @classmethod
    def from_config(
        cls,
        config: MastoConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> "Instance":
        """Create an Instance from configuration.

        Args:
            config: Configuration. If None, loads from environment.
            transport: Optional httpx transport.

        Raises:
            ValueError: If no hostname is configured.
        """
        config = config or MastoConfig()
        config.validate_config()

        instance = cls(config.hostname, config.access_token, transport=transport)
        if config.proxy:
            instance.set_proxy(config.proxy)
        if config.cainfo:
            instance.set_cainfo(config.cainfo)
        if config.useragent:
            instance.set_useragent(config.useragent)
        return instance

    def __enter__(self) -> "Instance":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close own session."""
        self.close()

    def close(self) -> None:
        """Close the Instance's own session."""
        self._session.close()

    @property
    def hostname(self) -> str:
        return self._hostname

    @property
    def baseuri(self) -> str:
        """``https://`` + the hostname."""
        return self._baseuri

    @property
    def access_token(self) -> str:
        return self._access_token

    @property
    def proxy(self) -> str:
        return self._proxy

    @property
    def cainfo(self) -> str:
        return self._cainfo

    @property
    def useragent(self) -> str:
        return self._useragent

    @property
    def transport(self) -> httpx.BaseTransport | None:
        return self._transport

    def set_access_token(self, access_token: str) -> None:
        self._session.set_access_token(access_token)
        self._access_token = access_token

    def set_proxy(self, proxy: str) -> None:
        self._session.set_proxy(proxy)
        self._proxy = proxy

    def set_cainfo(self, path: str) -> None:
        self._session.set_cainfo(path)
        self._cainfo = path

    def set_useragent(self, useragent: str) -> None:
        self._session.set_useragent(useragent)
        self._useragent = useragent

    def copy_connection_properties(self, session: TransportSession) -> None:
        """Apply the current settings to a freshly created session."""
        session.setup_connection_properties(
            proxy=self._proxy,
            access_token=self._access_token,
            cainfo=self._cainfo,
            useragent=self._useragent,
        )

    def get_max_chars(self) -> int:
        """Return the maximum number of characters per post.

        Queried from the instance on the first call and cached. Falls back to
        500 if the request fails or the field cannot be found; never raises.
        """
        if self._max_chars != 0:
            return self._max_chars

        try:
            logger.debug(f"Querying {self._hostname} for max_toot_chars…")
            answer = self._session.make_request("GET", self._baseuri + resolve(V1.INSTANCE))
            if not answer:
                logger.debug("Could not get instance info.")
                return DEFAULT_MAX_CHARS

            max_chars = _find_number(answer.body, "max_toot_chars")
            if max_chars is None:
                max_chars = _find_number(answer.body, "max_characters")
            if max_chars is None:
                logger.debug("max_toot_chars not found.")
                max_chars = DEFAULT_MAX_CHARS
            self._max_chars = max_chars
            logger.debug(f"Set max_chars to: {self._max_chars}")
        except Exception as e:
            logger.debug(f"Unexpected exception: {e}")
            return DEFAULT_MAX_CHARS

        return self._max_chars

    def get_nodeinfo(self) -> Answer:
        """Return the NodeInfo document of the instance.

        Looks up ``/.well-known/nodeinfo`` and fetches the link that sorts
        last, which is the newest schema version.
        """
        logger.debug(f"Finding location of NodeInfo on {self._hostname}…")
        answer = self._session.make_request("GET", self._baseuri + NODEINFO_DISCOVERY)
        if not answer:
            logger.debug("NodeInfo not found.")
            return answer

        hrefs = sorted(re.findall(r'"href"\s*:\s*"([^"]+)"', answer.body))
        if not hrefs:
            logger.debug("No NodeInfo link found.")
            return Answer(error_message="No NodeInfo link found.", headers=answer.headers, body=answer.body)

        logger.debug(f"Selecting href: {hrefs[-1]}")
        return self._session.make_request("GET", hrefs[-1])

    def get_post_formats(self) -> list[str]:
        """Return the allowed post formats (MIME types).

        Read from ``metadata.postFormats`` in NodeInfo on the first call and
        cached. Falls back to ``["text/plain"]``; never raises.
        """
        if self._post_formats:
            return list(self._post_formats)

        try:
            logger.debug(f"Querying {self._hostname} for postFormats…")
            answer = self.get_nodeinfo()
            if not answer:
                logger.debug("Couldn't get NodeInfo.")
                return [DEFAULT_POST_FORMAT]

            match = re.search(r'"postFormats"\s*:\s*\[([^\]]*)\]', answer.body)
            formats = re.findall(r'"([^"]*)"', match.group(1)) if match else []
            if not formats:
                logger.debug("Couldn't find metadata.postFormats.")
                formats = [DEFAULT_POST_FORMAT]
            self._post_formats = formats
            logger.debug(f"Found postFormats: {formats}")
        except Exception as e:
            logger.debug(f"Unexpected exception: {e}")
            return [DEFAULT_POST_FORMAT]

        return list(self._post_formats)


class ObtainToken(TransportSession):
    """Obtain an access token in two steps.

    Usage:
        token = ObtainToken(instance)
        answer = token.register_application("Client", "read write")
        print(f"Visit {answer} and enter the code:")
        answer = token.exchange_code(input())
        # The token is now set in `instance` as well.

    ``exchange_code`` must only be called after ``register_application``.
    """

    def __init__(self, instance: Instance):
        super().__init__(transport=instance.transport)
        self._instance = instance
        self._baseuri = instance.baseuri
        self._scopes = ""
        self._client_id = ""
        self._client_secret = ""
        instance.copy_connection_properties(self)

    def register_application(self, client_name: str, scopes: str = "", website: str = "") -> Answer:
        """Register an application and build the authorization URI.

        Args:
            client_name: Name of the application
            scopes: Space separated scopes, defaults to "read"
            website: Optional homepage of the application

        Returns:
            On success the Answer's body is the URI where the user gets the
            authorization code; otherwise the unmodified Answer.
        """
        self._scopes = scopes or DEFAULT_SCOPES
        parameters = {
            "client_name": client_name,
            "redirect_uris": REDIRECT_URI,
            "scopes": self._scopes,
        }
        if website:
            parameters["website"] = website

        answer = self.make_request("POST", self._baseuri + resolve(V1.APPS), parameters)
        if not answer:
            return answer

        client_id = _find_string(answer.body, "client_id")
        client_secret = _find_string(answer.body, "client_secret")
        if not client_id or not client_secret:
            logger.debug("client_id or client_secret not found.")
            return answer
        self._client_id = client_id
        self._client_secret = client_secret

        uri = (
            f"{self._baseuri}{resolve(OAuth.AUTHORIZE)}"
            f"?scope={quote(self._scopes, safe='')}"
            f"&response_type=code"
            f"&redirect_uri={quote(REDIRECT_URI, safe='')}"
            f"&client_id={client_id}"
        )
        if website:
            uri += f"&website={quote(website, safe='')}"
        return replace(answer, body=uri)

    def exchange_code(self, code: str) -> Answer:
        """Exchange the authorization code for an access token.

        On success the Answer's body is the token, and the token is set in
        the Instance this object was created from.
        """
        parameters = {
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "redirect_uri": REDIRECT_URI,
            "code": code,
            "grant_type": "authorization_code",
            "scope": self._scopes,
        }

        answer = self.make_request("POST", self._baseuri + resolve(OAuth.TOKEN), parameters)
        if not answer:
            return answer

        access_token = _find_string(answer.body, "access_token")
        if not access_token:
            logger.debug("access_token not found.")
            return answer

        self._instance.set_access_token(access_token)
        return replace(answer, body=access_token)

    step_1 = register_application
    step_2 = exchange_code
