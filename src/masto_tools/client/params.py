"""Parameter encoding for API calls.

Parameters are a mapping from name to either a single string or a list of
strings. Lists are always sent as ``name[]``, even with one element. A value
starting with ``@file:`` uploads the file at the path that follows.

Example:
    parameters = {
        "poll[expires_in]": "86400",
        "poll[options]": ["Yes", "No", "Maybe"],
        "status": "How is the weather?",
    }
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .exceptions import MastoConfigurationError, TransportErrorCode

logger = logging.getLogger("masto-tools")

ParameterValue = Union[str, list[str]]
ParameterMap = dict[str, ParameterValue]

FILE_MARKER = "@file:"

# Parameters that may replace a <NAME> placeholder in an endpoint template.
PLACEHOLDER_PARAMETERS = frozenset({
    "id",
    "nickname",
    "nickname_or_id",
    "account_id",
    "list_id",
    "hashtag",
    "permission_group",
    "instance",
    "report_id",
    "name",
    "emoji",
})


@dataclass(frozen=True)
class FormPart:
    """One part of a multipart form."""
    name: str
    value: str

    @property
    def is_file(self) -> bool:
        return self.value.startswith(FILE_MARKER)

    @property
    def path(self) -> Path:
        return Path(self.value[len(FILE_MARKER):])


def replace_placeholder(uri: str, name: str, value: ParameterValue) -> str | None:
    """Replace ``<NAME>`` in *uri* with *value*.

    Returns:
        The new URI, or None if *name* is not a placeholder parameter, the
        value is a list, or the placeholder does not occur in *uri*.
    """
    if name not in PLACEHOLDER_PARAMETERS or not isinstance(value, str):
        return None

    pattern = re.compile(f"<{re.escape(name)}>", re.IGNORECASE)
    if not pattern.search(uri):
        return None

    logger.debug(f"Replaced <{name.upper()}> in URI with {value}")
    return pattern.sub(lambda _: value, uri, count=1)


def apply(uri: str, parameters: ParameterMap | None) -> tuple[str, ParameterMap]:
    """Substitute placeholders and return the parameters still to be encoded."""
    remaining: ParameterMap = {}
    for name in sorted(parameters or {}):
        value = parameters[name]
        replaced = replace_placeholder(uri, name, value)
        if replaced is None:
            remaining[name] = value
        else:
            uri = replaced
    return uri, remaining


def build_query(parameters: ParameterMap) -> str:
    """Encode parameters as a query string.

    Values are not percent-encoded; callers escape them where needed.
    """
    entries: list[str] = []
    for name in sorted(parameters):
        value = parameters[name]
        if isinstance(value, str):
            entries.append(f"{name}={value}")
        else:
            entries.extend(f"{name}[]={item}" for item in value)

    if not entries:
        return ""
    return "?" + "&".join(entries)


def build_form(parameters: ParameterMap) -> list[FormPart]:
    """Split parameters into multipart form parts, one per value."""
    parts: list[FormPart] = []
    for name in sorted(parameters):
        value = parameters[name]
        if isinstance(value, str):
            parts.append(FormPart(name, value))
        else:
            parts.extend(FormPart(f"{name}[]", item) for item in value)
    return parts


def to_httpx_files(parts: list[FormPart]) -> list[tuple[str, tuple]]:
    """Convert form parts into the ``files=`` argument of httpx.

    Plain values get no filename, so they are sent as ordinary form fields.

    Raises:
        MastoConfigurationError: If a field name is empty or a file cannot be read.
    """
    logger.debug("Building HTTP form.")
    files: list[tuple[str, tuple]] = []
    for part in parts:
        if not part.name:
            raise MastoConfigurationError("Could not build HTTP form.", error_buffer="empty field name")

        if part.is_file:
            try:
                content = part.path.read_bytes()
            except OSError as e:
                raise MastoConfigurationError(
                    "Could not build HTTP form.",
                    error_code=TransportErrorCode.READ_ERROR,
                    error_buffer=str(e),
                ) from e
            files.append((part.name, (part.path.name, content)))
        else:
            files.append((part.name, (None, part.value.encode("utf-8"))))
        logger.debug(f"Set form part: {part.name} = {part.value}")
    return files
