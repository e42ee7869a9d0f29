"""Dependency container for VNC Session MCP."""

from dataclasses import dataclass

from vnc_session_mcp.config import Config
from vnc_session_mcp.services.pool import ConnectionPool


@dataclass
class Dependencies:
    """Configuration and connection pool shared by the MCP tools.

    Example:
        deps = Dependencies.create()
        conn = await deps.pool.get_connection(deps.config.get_host("tootie"))
    """

    config: Config
    pool: ConnectionPool

    @classmethod
    def create(cls) -> "Dependencies":
        """Create dependencies from the environment."""
        return cls.from_config(Config.from_env())

    @classmethod
    def from_config(cls, config: Config) -> "Dependencies":
        """Create dependencies with a pool configured from ``config``."""
        pool = ConnectionPool(
            idle_timeout=config.idle_timeout,
            max_size=config.max_pool_size,
            known_hosts=config.known_hosts_path,
            strict_host_key_checking=config.strict_host_key_checking,
        )
        return cls(config=config, pool=pool)

    async def cleanup(self) -> None:
        """Close all pooled connections."""
        await self.pool.close_all()
