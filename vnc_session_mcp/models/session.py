"""Session picker decisions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Cancel:
    """Abort without connecting."""


@dataclass(frozen=True)
class ConnectNew:
    """Start a new session and connect to it."""


@dataclass(frozen=True)
class ConnectExisting:
    """Connect to a running session."""

    session_id: str


@dataclass(frozen=True)
class KillExisting:
    """Kill a running session and keep managing sessions."""

    session_id: str


SelectionDecision = Cancel | ConnectNew | ConnectExisting | KillExisting
