"""SSH config file parser.

Reads ~/.ssh/config and extracts the hosts a session can be managed on.
"""

import logging
import os
import re
from pathlib import Path

from vnc_session_mcp.models import SSHHost

logger = logging.getLogger(__name__)

_HOST_LINE = re.compile(r"^Host\s+(.+)$", re.IGNORECASE)
_OPTION_LINE = re.compile(r"^(\w+)\s*=?\s*(.+)$")


def _is_pattern(name: str) -> bool:
    return "*" in name or "?" in name or name.startswith("!")


class SSHConfigParser:
    """Parser for SSH config files.

    Understands Host blocks with HostName, User, Port and IdentityFile.
    Options under ``Host *`` act as defaults for every later block.
    """

    def __init__(
        self,
        config_path: Path | str | None = None,
        allowlist: list[str] | None = None,
        blocklist: list[str] | None = None,
    ):
        """Initialize SSH config parser.

        Args:
            config_path: Path to SSH config file (default: ~/.ssh/config)
            allowlist: Only include these hosts (if set)
            blocklist: Exclude these hosts
        """
        if config_path is None:
            config_path = Path.home() / ".ssh" / "config"

        self.config_path = Path(config_path)
        self.allowlist = set(allowlist) if allowlist else None
        self.blocklist = set(blocklist) if blocklist else set()

    def parse(self) -> dict[str, SSHHost]:
        """Parse SSH config and return host definitions.

        Returns:
            Dictionary mapping host alias to SSHHost
        """
        if not self.config_path.exists():
            logger.warning("SSH config not found: %s", self.config_path)
            return {}

        try:
            content = self.config_path.read_text()
        except OSError as e:
            logger.warning("Cannot read SSH config %s: %s", self.config_path, e)
            return {}

        hosts: dict[str, SSHHost] = {}
        defaults: dict[str, str] = {}
        names: list[str] = []
        options: dict[str, str] = {}

        for raw in content.splitlines():
            line = raw.strip()
            if not line or line.startswith("#"):
                continue

            host_match = _HOST_LINE.match(line)
            if host_match:
                self._add_hosts(hosts, names, options)
                patterns = host_match.group(1).split()
                names = [p for p in patterns if not _is_pattern(p)]
                # a block with only patterns (Host *) feeds the defaults
                options = defaults if not names else defaults.copy()
                continue

            option_match = _OPTION_LINE.match(line)
            if option_match and (names or options is defaults):
                key = option_match.group(1).lower()
                value = option_match.group(2).strip()
                if key == "identityfile":
                    value = os.path.expanduser(value)
                options[key] = value

        self._add_hosts(hosts, names, options)

        logger.info("Parsed %d hosts from %s", len(hosts), self.config_path)
        return hosts

    def _add_hosts(
        self,
        hosts: dict[str, SSHHost],
        names: list[str],
        options: dict[str, str],
    ) -> None:
        """Add one SSHHost per allowed alias of a finished Host block."""
        for name in names:
            if not self._is_host_allowed(name):
                continue
            try:
                port = int(options.get("port", "22"))
            except ValueError:
                logger.warning("Invalid port for host %s, using 22", name)
                port = 22
            hosts[name] = SSHHost(
                name=name,
                hostname=options.get("hostname", name),
                user=options.get("user", "root"),
                port=port,
                identity_file=options.get("identityfile"),
            )

    def _is_host_allowed(self, name: str) -> bool:
        """Check if host passes allowlist/blocklist filters.

        Args:
            name: Host name to check

        Returns:
            True if host is allowed
        """
        if self.allowlist:
            return name in self.allowlist
        return name not in self.blocklist
