"""Configuration module for VNC Session MCP.

Provides focused classes for different configuration concerns:
- Config: Main configuration class (aggregates all components)
- SSHConfigParser: Parses ~/.ssh/config files
- HostKeyVerifier: Manages SSH host key verification
- Settings: Environment variable configuration
"""

from vnc_session_mcp.config.host_keys import HostKeyVerifier
from vnc_session_mcp.config.main import Config
from vnc_session_mcp.config.parser import SSHConfigParser
from vnc_session_mcp.config.settings import (
    DEFAULT_SERVER_DIR,
    Settings,
    resolve_server_args,
    resolve_server_dir,
)

__all__ = [
    "Config",
    "DEFAULT_SERVER_DIR",
    "HostKeyVerifier",
    "SSHConfigParser",
    "Settings",
    "resolve_server_args",
    "resolve_server_dir",
]
