"""Server-sent events from the streaming API.

The streaming API sends records of the form::

    event: update
    data: {"id": "103264589437468018", ...}

separated by a blank line. Lines starting with ``:`` are heartbeats.
"""

from dataclasses import dataclass
from enum import Enum

EVENT_MARKER = "event: "
DATA_MARKER = "data: "
RECORD_TERMINATOR = "\n\n"


class EventType(str, Enum):
    """Event kinds sent by the server."""

    UPDATE = "update"
    DELETE = "delete"
    NOTIFICATION = "notification"
    FILTERS_CHANGED = "filters_changed"
    CONVERSATION = "conversation"
    ANNOUNCEMENT = "announcement"
    ANNOUNCEMENT_REACTION = "announcement.reaction"
    ANNOUNCEMENT_DELETE = "announcement.delete"
    STATUS_UPDATE = "status.update"
    ENCRYPTED_MESSAGE = "encrypted_message"


@dataclass(frozen=True)
class Event:
    """A single event from a stream."""
    type: str
    data: str

    @property
    def kind(self) -> EventType | None:
        """The event type as :class:`EventType`, None if unknown."""
        try:
            return EventType(self.type)
        except ValueError:
            return None


def extract_events(text: str) -> tuple[list[Event], str]:
    """Extract all complete events from the start of *text*.

    A record is complete once a blank line follows its ``event:`` line.

    Returns:
        The events in order, and the unconsumed rest of *text* without
        leading heartbeats.
    """
    events: list[Event] = []
    consumed = 0
    while True:
        start = text.find(EVENT_MARKER, consumed)
        if start == -1:
            break
        end = text.find(RECORD_TERMINATOR, start)
        if end == -1:
            break

        record = text[start + len(EVENT_MARKER):end]
        event_type, _, rest = record.partition("\n")
        data = ""
        data_start = rest.find(DATA_MARKER)
        if data_start != -1:
            data = rest[data_start + len(DATA_MARKER):]
        events.append(Event(type=event_type.strip(), data=data))
        consumed = end + len(RECORD_TERMINATOR)

    return events, _skip_comments(text[consumed:])


def _skip_comments(rest: str) -> str:
    """Drop complete heartbeat lines and blank lines from the start of *rest*."""
    while rest:
        if rest.startswith("\n"):
            rest = rest[1:]
        elif rest.startswith(":") and "\n" in rest:
            rest = rest.partition("\n")[2]
        else:
            break
    return rest
