"""MCP tools for VNC Session MCP."""

from vnc_session_mcp.tools.pickers import ScriptedPicker, parse_action
from vnc_session_mcp.tools.sessions import (
    vnc_connect,
    vnc_hosts,
    vnc_kill,
    vnc_list,
    vnc_otp,
    vnc_start,
)

__all__ = [
    "ScriptedPicker",
    "parse_action",
    "vnc_connect",
    "vnc_hosts",
    "vnc_kill",
    "vnc_list",
    "vnc_otp",
    "vnc_start",
]
