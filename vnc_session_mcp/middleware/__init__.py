"""VNC Session MCP middleware components."""

from vnc_session_mcp.middleware.base import SessionMiddleware
from vnc_session_mcp.middleware.errors import ErrorHandlingMiddleware, describe_error
from vnc_session_mcp.middleware.logging import LoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "LoggingMiddleware",
    "SessionMiddleware",
    "describe_error",
]
