"""Parsing of TurboVNC Server command output.

The server's text contract is line based: the session list and the start
result arrive on the first stdout line, the one-time password on the first
stderr line.
"""

import re

_WHITESPACE = re.compile(r"\s")
_UP_TO_LAST_COLON = re.compile(r"^.*:")


def parse_session_list(line: str | None) -> list[str]:
    """Split a session list line into session identifiers.

    Order is preserved and duplicates are kept.

    Returns:
        Session identifiers, or an empty list if there was no output.
    """
    if line is None:
        return []
    return line.split()


def parse_start_output(line: str | None) -> str | None:
    """Extract the new session's identifier from the start command output.

    The identifier is the first token of the line, e.g. ``"vnc3 1234"``
    yields ``"vnc3"``.

    Returns:
        Session identifier, or None if the line has no tokens.
    """
    if line is None:
        return None
    tokens = line.split()
    return tokens[0] if tokens else None


def parse_credential_line(line: str) -> str:
    """Extract a one-time password from a diagnostic line.

    All whitespace is removed, then everything up to and including the last
    colon. ``"  Full control one-time password: 1234\\n"`` yields ``"1234"``.
    """
    stripped = _WHITESPACE.sub("", line)
    return _UP_TO_LAST_COLON.sub("", stripped)
