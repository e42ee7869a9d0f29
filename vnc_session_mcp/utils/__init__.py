"""Utilities for VNC Session MCP."""

from vnc_session_mcp.utils.console import ColorfulFormatter, MCPRequestFormatter
from vnc_session_mcp.utils.parser import (
    parse_credential_line,
    parse_session_list,
    parse_start_output,
)
from vnc_session_mcp.utils.shell import join_command, quote_arg
from vnc_session_mcp.utils.validation import validate_host, validate_session_id

__all__ = [
    "ColorfulFormatter",
    "MCPRequestFormatter",
    "join_command",
    "parse_credential_line",
    "parse_session_list",
    "parse_start_output",
    "quote_arg",
    "validate_host",
    "validate_session_id",
]
