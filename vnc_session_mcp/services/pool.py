"""SSH connection pool.

One asyncssh connection is kept per configured host and reused by every
session operation on that host. Connection creation is serialized per host;
the pool dictionary itself is guarded by ``_meta_lock``. Connections idle for
longer than ``idle_timeout`` are closed by a background task.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

import asyncssh

from vnc_session_mcp.models import PooledConnection

if TYPE_CHECKING:
    from vnc_session_mcp.models import SSHHost

logger = logging.getLogger(__name__)


class ConnectionPool:
    """SSH connection pool with idle cleanup and a size limit."""

    def __init__(
        self,
        idle_timeout: int = 60,
        max_size: int = 100,
        known_hosts: str | None = None,
        strict_host_key_checking: bool = True,
    ) -> None:
        """Initialize pool.

        Args:
            idle_timeout: Seconds before idle connections are closed
            max_size: Maximum number of open connections (must be > 0)
            known_hosts: Path to known_hosts file, or None to disable verification
            strict_host_key_checking: Whether to reject unknown host keys

        Raises:
            ValueError: If max_size is not positive
        """
        if max_size <= 0:
            raise ValueError(f"max_size must be > 0, got {max_size}")

        self.idle_timeout = idle_timeout
        self.max_size = max_size
        self._connections: dict[str, PooledConnection] = {}
        self._host_locks: dict[str, asyncio.Lock] = {}
        self._meta_lock = asyncio.Lock()
        self._cleanup_task: asyncio.Task[Any] | None = None
        self._known_hosts = known_hosts
        self._strict_host_key = strict_host_key_checking

        if self._known_hosts is None:
            logger.warning(
                "SSH host key verification DISABLED - vulnerable to MITM attacks. "
                "Set VNCSM_KNOWN_HOSTS to a valid known_hosts file path."
            )

        logger.info(
            "ConnectionPool initialized (idle_timeout=%ds, max_size=%d)",
            idle_timeout,
            max_size,
        )

    async def _get_host_lock(self, host_name: str) -> asyncio.Lock:
        async with self._meta_lock:
            return self._host_locks.setdefault(host_name, asyncio.Lock())

    async def _evict_if_full(self) -> None:
        """Close the least recently used connection when at capacity."""
        async with self._meta_lock:
            if len(self._connections) < self.max_size:
                return
            oldest = min(
                self._connections, key=lambda name: self._connections[name].last_used
            )
            pooled = self._connections.pop(oldest)

        logger.info("Pool at capacity (%d), closing connection to %s", self.max_size, oldest)
        pooled.connection.close()

    async def _connect(self, host: "SSHHost") -> asyncssh.SSHClientConnection:
        client_keys = [host.identity_file] if host.identity_file else None
        try:
            return await asyncssh.connect(
                host.hostname,
                port=host.port,
                username=host.user,
                known_hosts=self._known_hosts,
                client_keys=client_keys,
            )
        except asyncssh.HostKeyNotVerifiable as e:
            if self._strict_host_key:
                logger.error(
                    "Host key verification failed for %s: %s. Add the host key "
                    "to %s or set VNCSM_STRICT_HOST_KEY_CHECKING=false",
                    host.name,
                    e,
                    self._known_hosts,
                )
                raise
            logger.warning(
                "Host key not verified for %s (strict mode disabled): %s",
                host.name,
                e,
            )
            return await asyncssh.connect(
                host.hostname,
                port=host.port,
                username=host.user,
                known_hosts=None,
                client_keys=client_keys,
            )

    async def get_connection(self, host: "SSHHost") -> asyncssh.SSHClientConnection:
        """Get the open connection to a host, connecting if needed."""
        host_lock = await self._get_host_lock(host.name)

        async with host_lock:
            pooled = self._connections.get(host.name)
            if pooled and not pooled.is_stale:
                pooled.touch()
                logger.debug(
                    "Reusing existing connection to %s (pool_size=%d)",
                    host.name,
                    len(self._connections),
                )
                return pooled.connection

            if pooled:
                logger.info("Connection to %s is stale, reconnecting", host.name)

            await self._evict_if_full()

            logger.info("Opening SSH connection to %s (%s)", host.name, host.address)
            conn = await self._connect(host)

            async with self._meta_lock:
                self._connections[host.name] = PooledConnection(connection=conn)

            logger.info(
                "SSH connection established to %s (pool_size=%d/%d)",
                host.name,
                len(self._connections),
                self.max_size,
            )

            if self._cleanup_task is None or self._cleanup_task.done():
                self._cleanup_task = asyncio.create_task(self._cleanup_loop())

            return conn

    async def _cleanup_loop(self) -> None:
        """Periodically close idle connections until the pool is empty."""
        interval = max(self.idle_timeout // 2, 1)
        while True:
            await asyncio.sleep(interval)
            await self._cleanup_idle()
            if not self._connections:
                logger.debug("Cleanup loop stopped - no connections remaining")
                break

    async def _cleanup_idle(self) -> None:
        """Close connections that are stale or have been idle too long."""
        async with self._meta_lock:
            host_names = list(self._connections)

        cutoff = datetime.now() - timedelta(seconds=self.idle_timeout)
        for host_name in host_names:
            host_lock = await self._get_host_lock(host_name)
            async with host_lock:
                pooled = self._connections.get(host_name)
                if pooled and (pooled.last_used < cutoff or pooled.is_stale):
                    logger.info(
                        "Closing %s connection to %s",
                        "stale" if pooled.is_stale else "idle",
                        host_name,
                    )
                    pooled.connection.close()
                    async with self._meta_lock:
                        del self._connections[host_name]

    async def remove_connection(self, host_name: str) -> None:
        """Close and forget the connection to a host, if any."""
        host_lock = await self._get_host_lock(host_name)
        async with host_lock:
            async with self._meta_lock:
                pooled = self._connections.pop(host_name, None)
            if pooled is None:
                logger.debug("No connection to remove for %s", host_name)
                return
            logger.info("Removing connection to %s", host_name)
            pooled.connection.close()

    async def close_all(self) -> None:
        """Close all connections and stop the cleanup task."""
        async with self._meta_lock:
            host_names = list(self._connections)

        if host_names:
            logger.info("Closing all %d connection(s)", len(host_names))
        for host_name in host_names:
            await self.remove_connection(host_name)

        if self._cleanup_task and not self._cleanup_task.done():
            self._cleanup_task.cancel()

    @property
    def pool_size(self) -> int:
        """Return the current number of connections in the pool."""
        return len(self._connections)

    @property
    def active_hosts(self) -> list[str]:
        """Return list of hosts with active connections."""
        return list(self._connections)
