"""Data models for VNC Session MCP."""

from vnc_session_mcp.models.command import Attempt, CommandResult, RemoteCommand
from vnc_session_mcp.models.session import (
    Cancel,
    ConnectExisting,
    ConnectNew,
    KillExisting,
    SelectionDecision,
)
from vnc_session_mcp.models.ssh import PooledConnection, SSHHost

__all__ = [
    "Attempt",
    "Cancel",
    "CommandResult",
    "ConnectExisting",
    "ConnectNew",
    "KillExisting",
    "PooledConnection",
    "RemoteCommand",
    "SelectionDecision",
    "SSHHost",
]
