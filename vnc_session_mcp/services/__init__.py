"""Services for VNC Session MCP."""

from vnc_session_mcp.services.connection import (
    HostConnectionError,
    open_host_connection,
)
from vnc_session_mcp.services.context import (
    CollectingErrorPresenter,
    CredentialStore,
    LoggingErrorPresenter,
    SessionContext,
    suppressed_errors,
)
from vnc_session_mcp.services.errors import (
    CommandTimeoutError,
    ExecutionError,
    RemoteCommandFailed,
    ServerNotInstalled,
    SessionManagerError,
    UnparsableServerOutput,
)
from vnc_session_mcp.services.manager import attempt, create_session
from vnc_session_mcp.services.pool import ConnectionPool
from vnc_session_mcp.services.runner import execute, run_remote_command
from vnc_session_mcp.services.sessions import (
    generate_otp,
    kill_session,
    list_sessions,
    start_session,
)
from vnc_session_mcp.services.state import get_deps, set_deps

__all__ = [
    "CollectingErrorPresenter",
    "CommandTimeoutError",
    "ConnectionPool",
    "CredentialStore",
    "ExecutionError",
    "HostConnectionError",
    "LoggingErrorPresenter",
    "RemoteCommandFailed",
    "ServerNotInstalled",
    "SessionContext",
    "SessionManagerError",
    "UnparsableServerOutput",
    "attempt",
    "create_session",
    "execute",
    "generate_otp",
    "get_deps",
    "kill_session",
    "list_sessions",
    "open_host_connection",
    "run_remote_command",
    "set_deps",
    "start_session",
    "suppressed_errors",
]
