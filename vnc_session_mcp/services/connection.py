"""Opening the SSH connection a session flow runs on."""

import logging
from typing import TYPE_CHECKING

import asyncssh

if TYPE_CHECKING:
    from vnc_session_mcp.models import SSHHost
    from vnc_session_mcp.protocols import SSHConnectionPool

logger = logging.getLogger(__name__)

TRANSPORT_ERRORS = (asyncssh.Error, OSError)


class HostConnectionError(Exception):
    """No SSH connection to the host could be opened for session management.

    Attributes:
        host_name: Host alias from the SSH config
        address: user@hostname:port that was dialled
        original_error: Error of the last connection attempt
    """

    def __init__(self, host: "SSHHost", original_error: Exception):
        self.host_name = host.name
        self.address = host.address
        self.original_error = original_error
        super().__init__(
            f"Cannot connect to {host.name} ({host.address}): {original_error}"
        )


async def open_host_connection(
    pool: "SSHConnectionPool",
    ssh_host: "SSHHost",
) -> "asyncssh.SSHClientConnection":
    """Get the pooled connection to a host, reconnecting once on failure.

    A pooled connection can be dropped by the remote sshd between tool
    calls. On a transport error the pool entry is discarded and one fresh
    connection is tried before giving up.

    Raises:
        HostConnectionError: If the fresh connection fails too
    """
    try:
        return await pool.get_connection(ssh_host)
    except TRANSPORT_ERRORS as e:
        logger.warning(
            "Cannot manage TurboVNC sessions on %s yet (%s), reconnecting",
            ssh_host.name,
            e,
        )

    await pool.remove_connection(ssh_host.name)
    try:
        conn = await pool.get_connection(ssh_host)
    except TRANSPORT_ERRORS as e:
        logger.error("Giving up on %s (%s): %s", ssh_host.name, ssh_host.address, e)
        raise HostConnectionError(ssh_host, e) from e

    logger.info("Reconnected to %s", ssh_host.name)
    return conn
