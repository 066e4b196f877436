"""Connections to an instance, used for API calls."""

import logging

from .answer import Answer
from .endpoints import AREAS, Endpoint, resolve
from .http import TransportSession
from .instance import Instance
from .params import ParameterMap
from .streaming import Event, extract_events

logger = logging.getLogger("masto-tools")

EndpointOrPath = Endpoint | str


class Connection(TransportSession):
    """Represents a connection to an instance. Used for requests.

    Takes the settings of the Instance at construction time.

    Usage:
        connection = Connection(instance)
        answer = connection.get(V1.ACCOUNTS_ID_FOLLOWERS, {"id": "12", "limit": "10"})
        if answer:
            print(answer.body)

    Streaming: run the request in a thread and drain the buffer from another.
        thread = threading.Thread(target=connection.get, args=(V1.STREAMING_PUBLIC,))
        thread.start()
        for event in connection.drain_events():
            ...
        connection.cancel_stream()
        thread.join()
    """

    def __init__(self, instance: Instance):
        """Initialize connection.

        Args:
            instance: An Instance with the access data.
        """
        super().__init__(transport=instance.transport)
        self._instance = instance
        self._baseuri = instance.baseuri
        instance.copy_connection_properties(self)

    def __copy__(self) -> "Connection":
        other = Connection(self._instance)
        self.copy_configuration_to(other)
        return other

    @property
    def instance(self) -> Instance:
        return self._instance

    def resolve_uri(self, endpoint: EndpointOrPath) -> str:
        """Turn an endpoint or path into a full URI.

        Endpoint members and relative paths are prefixed with the base URI,
        absolute ``http(s)://`` URIs are used as they are.
        """
        if isinstance(endpoint, AREAS):
            return self._baseuri + resolve(endpoint)
        if not isinstance(endpoint, str):
            raise TypeError(f"Not an API endpoint or path: {endpoint!r}")
        if endpoint.startswith(("https://", "http://")):
            return endpoint
        return self._baseuri + endpoint

    def call(
        self,
        method: str,
        endpoint: EndpointOrPath,
        parameters: ParameterMap | None = None,
    ) -> Answer:
        """Make an API call.

        Args:
            method: GET, POST, PATCH, PUT or DELETE
            endpoint: Endpoint member, path like "/api/v1/instance", or full URI
            parameters: Optional parameters

        Returns:
            Answer of the request

        Raises:
            MastoConfigurationError: If the transfer cannot be set up
        """
        return self.make_request(method, self.resolve_uri(endpoint), parameters)

    def get(self, endpoint: EndpointOrPath, parameters: ParameterMap | None = None) -> Answer:
        """Make a HTTP GET call. Blocks until a stream is cancelled or ends."""
        return self.call("GET", endpoint, parameters)

    def post(self, endpoint: EndpointOrPath, parameters: ParameterMap | None = None) -> Answer:
        """Make a HTTP POST call."""
        return self.call("POST", endpoint, parameters)

    def patch(self, endpoint: EndpointOrPath, parameters: ParameterMap | None = None) -> Answer:
        """Make a HTTP PATCH call."""
        return self.call("PATCH", endpoint, parameters)

    def put(self, endpoint: EndpointOrPath, parameters: ParameterMap | None = None) -> Answer:
        """Make a HTTP PUT call."""
        return self.call("PUT", endpoint, parameters)

    def delete(self, endpoint: EndpointOrPath, parameters: ParameterMap | None = None) -> Answer:
        """Make a HTTP DELETE call."""
        return self.call("DELETE", endpoint, parameters)

    def drain_raw(self) -> str:
        """Return everything received since the last call and clear the buffer."""
        return self.take_body()

    def drain_events(self) -> list[Event]:
        """Return all complete events received since the last call.

        Incomplete trailing data stays in the buffer for the next call.
        """
        events, rest = extract_events(self.take_body())
        self.restore_body(rest)
        if events:
            logger.debug(f"Extracted {len(events)} events.")
        return events
