"""Protocol interfaces for the collaborators of the session manager.

The selection loop depends only on these shapes, so tests and alternative
front ends can pass any object that provides the methods.

Usage Example:

    from vnc_session_mcp.models import ConnectExisting

    class FirstSessionPicker:
        async def present(self, sessions, host):
            return ConnectExisting(sessions[0])

    ctx = SessionContext(conn=conn, host="tootie", picker=FirstSessionPicker())
    session_id = await create_session(ctx)
"""

from typing import Any, Protocol, runtime_checkable

from vnc_session_mcp.models import SelectionDecision, SSHHost


@runtime_checkable
class SessionPicker(Protocol):
    """Turns a session list into a user decision.

    Called once per loop iteration with a freshly fetched list.
    """

    async def present(self, sessions: list[str], host: str) -> SelectionDecision:
        """Show sessions and return exactly one decision.

        Args:
            sessions: Session identifiers currently running on host
            host: Host the sessions belong to

        Returns:
            Cancel, ConnectNew, ConnectExisting or KillExisting
        """
        ...


@runtime_checkable
class CredentialSink(Protocol):
    """Receives the one-time password for the chosen session."""

    def set_credential(self, credential: str) -> None:
        """Store a freshly generated one-time password."""
        ...


@runtime_checkable
class ErrorPresenter(Protocol):
    """Surfaces errors to the user.

    Presentation can be switched off around operations whose failures
    must not interrupt the user.
    """

    def suppress(self, suppressed: bool) -> None:
        """Turn error presentation off (True) or back on (False)."""
        ...

    def present(self, error: Exception) -> None:
        """Show an error unless presentation is suppressed."""
        ...


@runtime_checkable
class SSHConnectionPool(Protocol):
    """Provides open SSH connections per configured host."""

    async def get_connection(self, host: SSHHost) -> Any:
        """Get or create connection for host.

        Raises:
            asyncssh.Error: If unable to connect
        """
        ...

    async def remove_connection(self, host_name: str) -> None:
        """Remove connection from pool. Safe if it does not exist."""
        ...

    async def close_all(self) -> None:
        """Close all connections in pool."""
        ...
