"""Application configuration.

Delegates to specialized components:
- SSHConfigParser: Reads ~/.ssh/config
- HostKeyVerifier: Manages known_hosts
- Settings: Environment variables
"""

import logging
import os
from dataclasses import dataclass, field

from vnc_session_mcp.config.host_keys import HostKeyVerifier
from vnc_session_mcp.config.parser import SSHConfigParser
from vnc_session_mcp.config.settings import Settings
from vnc_session_mcp.models import SSHHost

logger = logging.getLogger(__name__)


def _get_list_env(key: str) -> list[str] | None:
    value = os.getenv(key, "").strip()
    if not value:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Config:
    """Application configuration.

    Aggregates settings from SSH config, known_hosts, and environment.
    """

    settings: Settings
    parser: SSHConfigParser
    host_keys: HostKeyVerifier
    _hosts_cache: dict[str, SSHHost] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment.

        Returns:
            Configured instance with all components initialized
        """
        settings = Settings.from_env()
        parser = SSHConfigParser(
            config_path=os.getenv("VNCSM_SSH_CONFIG"),
            allowlist=_get_list_env("VNCSM_ALLOWLIST"),
            blocklist=_get_list_env("VNCSM_BLOCKLIST"),
        )
        strict = os.getenv("VNCSM_STRICT_HOST_KEY_CHECKING", "true").lower() != "false"
        host_keys = HostKeyVerifier(
            known_hosts_path=os.getenv("VNCSM_KNOWN_HOSTS"),
            strict_checking=strict,
        )
        return cls(settings=settings, parser=parser, host_keys=host_keys)

    def get_hosts(self) -> dict[str, SSHHost]:
        """Get SSH hosts from config.

        Lazy loads and caches hosts on first call.
        """
        if not self._hosts_cache:
            self._hosts_cache = self.parser.parse()
        return self._hosts_cache

    def get_host(self, name: str) -> SSHHost | None:
        """Get host by name, or None if it is not configured."""
        return self.get_hosts().get(name)

    # Delegate to settings for convenience
    @property
    def server_dir(self) -> str:
        """Resolved remote TurboVNC Server installation directory."""
        return self.settings.resolved_server_dir

    @property
    def server_args(self) -> str | None:
        """Resolved extra arguments for new sessions."""
        return self.settings.resolved_server_args

    @property
    def auto_otp(self) -> bool:
        """Whether to generate a one-time password for the chosen session."""
        return self.settings.auto_otp

    @property
    def command_timeout(self) -> int:
        """Remote command timeout in seconds."""
        return self.settings.command_timeout

    @property
    def idle_timeout(self) -> int:
        """Connection idle timeout in seconds."""
        return self.settings.idle_timeout

    @property
    def max_pool_size(self) -> int:
        """Maximum connection pool size."""
        return self.settings.max_pool_size

    @property
    def transport(self) -> str:
        """Transport type (http or stdio)."""
        return self.settings.transport

    @property
    def http_host(self) -> str:
        """HTTP server bind address."""
        return self.settings.http_host

    @property
    def http_port(self) -> int:
        """HTTP server port."""
        return self.settings.http_port

    @property
    def known_hosts_path(self) -> str | None:
        """Path to known_hosts file or None if disabled."""
        return self.host_keys.get_known_hosts_path()

    @property
    def strict_host_key_checking(self) -> bool:
        """Whether to reject unknown host keys."""
        return self.host_keys.strict_checking
