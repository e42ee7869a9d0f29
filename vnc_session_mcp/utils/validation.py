"""Input validation utilities."""

from typing import Final

# Characters that must never reach a remote command line unquoted
SUSPICIOUS_CHARS: Final[list[str]] = [
    "/",
    "\\",
    ";",
    "&",
    "|",
    "$",
    "`",
    "<",
    ">",
    "'",
    '"',
    "\x00",
]


def validate_host(host: str) -> str:
    """Validate a host name.

    Args:
        host: The host name to validate

    Returns:
        Validated host name

    Raises:
        ValueError: If host name is invalid
    """
    if not host:
        raise ValueError("Host cannot be empty")

    if len(host) > 253:
        raise ValueError(f"Host name too long: {len(host)} chars")

    if any(char.isspace() for char in host):
        raise ValueError(f"Host contains whitespace: {host!r}")

    for char in SUSPICIOUS_CHARS:
        if char in host:
            raise ValueError(f"Host contains invalid characters: {host!r}")

    return host


def validate_session_id(session_id: str) -> str:
    """Validate a session identifier supplied by a client.

    Identifiers are opaque display designations such as ``:1`` or
    ``myhost:2``; only their shape is checked here.

    Raises:
        ValueError: If the identifier is empty or contains whitespace or
            shell metacharacters
    """
    session_id = session_id.strip()
    if not session_id:
        raise ValueError("Session cannot be empty")

    if any(char.isspace() for char in session_id):
        raise ValueError(f"Session contains whitespace: {session_id!r}")

    for char in SUSPICIOUS_CHARS:
        if char in session_id:
            raise ValueError(f"Session contains invalid characters: {session_id!r}")

    return session_id
