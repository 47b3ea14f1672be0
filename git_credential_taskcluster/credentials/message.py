"""Credential helper message model and wire codec.

git talks to credential helpers with a line-oriented format: one
``key=value`` pair per line, each line newline-terminated, with no escaping.
This module converts between that format and :class:`HelperMessage`.

Wire format rules:
    - Empty lines are ignored, including the one produced by a final newline.
    - The key is everything before the first ``=``; the value is everything
      after it, so values may contain ``=``.
    - When a key repeats, the last value wins.
    - Keys outside :data:`FIELD_ORDER` are rejected.
    - Serialization emits non-empty fields only, in :data:`FIELD_ORDER`.

Example:
    >>> msg = parse_message("protocol=https\\nhost=example.com\\n")
    >>> msg.host
    'example.com'
    >>> msg.with_credentials("u", "p").to_wire()
    'protocol=https\\nhost=example.com\\nusername=u\\npassword=p\\n'
"""

from dataclasses import dataclass, fields, replace

from git_credential_taskcluster.exceptions import MessageFormatError

FIELD_ORDER: tuple[str, ...] = ("protocol", "host", "path", "username", "password", "url")


@dataclass(frozen=True)
class HelperMessage:
    """One credential helper request or response.

    A field that is absent on the wire is the empty string. There is no
    difference between "not given" and "given as empty".

    Attributes:
        protocol: URL scheme (e.g., 'https')
        host: Hostname, optionally with port
        path: URL path component
        username: Credential username
        password: Credential password
        url: Full URL, alternative to protocol/host/path
    """

    protocol: str = ""
    host: str = ""
    path: str = ""
    username: str = ""
    password: str = ""
    url: str = ""

    def __repr__(self) -> str:
        parts = []
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "password" and value:
                value = "***"
            parts.append(f"{f.name}={value!r}")
        return f"HelperMessage({', '.join(parts)})"

    __str__ = __repr__

    @property
    def is_empty(self) -> bool:
        """True when no field carries a value."""
        return not any(getattr(self, name) for name in FIELD_ORDER)

    def with_credentials(self, username: str, password: str) -> "HelperMessage":
        """Return a copy with username and password replaced."""
        return replace(self, username=username, password=password)

    def to_wire(self) -> str:
        """Serialize to the credential helper wire format."""
        return format_message(self)

    def to_bytes(self) -> bytes:
        """Serialize to UTF-8 encoded wire format."""
        return self.to_wire().encode("utf-8")

    @classmethod
    def from_wire(cls, src: str | bytes) -> "HelperMessage":
        """Parse a message from wire format. See :func:`parse_message`."""
        return parse_message(src)


def parse_raw_message(src: str) -> dict[str, str]:
    """Split wire-format text into a key/value mapping.

    No key validation happens here, only line structure.

    Args:
        src: Raw request text

    Returns:
        Mapping of key to value, last occurrence winning

    Raises:
        MessageFormatError: If a non-empty line has no ``=``
    """
    ret: dict[str, str] = {}

    for line in src.split("\n"):
        if not line:
            continue

        key, sep, value = line.partition("=")
        if not sep:
            raise MessageFormatError(f"invalid credential line: {line}", line=line)

        ret[key] = value

    return ret


def parse_message(src: str | bytes) -> HelperMessage:
    """Parse a complete request body into a :class:`HelperMessage`.

    Args:
        src: Request body, as text or UTF-8 bytes

    Returns:
        The decoded message

    Raises:
        MessageFormatError: If the input is not UTF-8, a line is malformed,
            or a key is not part of the protocol
    """
    if isinstance(src, bytes):
        try:
            src = src.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MessageFormatError(f"credential input is not valid UTF-8: {e}") from e

    raw = parse_raw_message(src)

    for key in raw:
        if key not in FIELD_ORDER:
            raise MessageFormatError(f"invalid credential key: {key}", key=key)

    return HelperMessage(**raw)


def format_message(message: HelperMessage) -> str:
    """Serialize a message, skipping empty fields.

    Args:
        message: Message to serialize

    Returns:
        Wire-format text; empty string when every field is empty
    """
    lines = []
    for name in FIELD_ORDER:
        value = getattr(message, name)
        if value:
            lines.append(f"{name}={value}\n")
    return "".join(lines)
