"""Shell command safety utilities."""

import shlex


def quote_arg(arg: str) -> str:
    """Safely quote a shell argument.

    Args:
        arg: Argument to quote

    Returns:
        Shell-safe quoted argument
    """
    return shlex.quote(arg)


def join_command(*parts: str) -> str:
    """Join command parts, dropping empty ones.

    Parts are inserted verbatim; quote untrusted values first.
    """
    return " ".join(part for part in parts if part)
