"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_SERVER_DIR = "/opt/TurboVNC"
SERVER_DIR_ENV = "TVNC_SERVERDIR"
SERVER_ARGS_ENV = "TVNC_SERVERARGS"


def resolve_server_dir(override: str | None = None) -> str:
    """Resolve the remote TurboVNC Server installation directory.

    Priority: explicit override, then TVNC_SERVERDIR, then /opt/TurboVNC.
    """
    if override is not None:
        return override
    return os.getenv(SERVER_DIR_ENV, DEFAULT_SERVER_DIR)


def resolve_server_args(override: str | None = None) -> str | None:
    """Resolve extra arguments for starting a session.

    Priority: explicit override, then TVNC_SERVERARGS, then none.
    """
    if override is not None:
        return override
    return os.getenv(SERVER_ARGS_ENV)


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # TurboVNC Server
    server_dir: str | None = field(default=None)
    server_args: str | None = field(default=None)
    auto_otp: bool = field(default=True)

    # Remote commands
    command_timeout: int = field(default=30)

    # Connection pool
    idle_timeout: int = field(default=60)
    max_pool_size: int = field(default=100)

    # Transport
    transport: str = field(default="http")
    http_host: str = field(default="0.0.0.0")
    http_port: int = field(default=8000)

    # Logging
    log_level: str = field(default="INFO")
    include_traceback: bool = field(default=False)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from VNCSM_* environment variables.

        Returns:
            Settings instance with values from environment
        """
        return cls(
            server_dir=os.getenv("VNCSM_SERVER_DIR"),
            server_args=os.getenv("VNCSM_SERVER_ARGS"),
            auto_otp=cls._get_bool("VNCSM_AUTO_OTP", True),
            command_timeout=cls._get_int("VNCSM_COMMAND_TIMEOUT", 30),
            idle_timeout=cls._get_int("VNCSM_IDLE_TIMEOUT", 60),
            max_pool_size=cls._get_positive_int("VNCSM_MAX_POOL_SIZE", 100),
            transport=cls._get_transport(),
            http_host=os.getenv("VNCSM_HTTP_HOST", "0.0.0.0"),
            http_port=cls._get_int("VNCSM_HTTP_PORT", 8000),
            log_level=os.getenv("VNCSM_LOG_LEVEL", "INFO"),
            include_traceback=cls._get_bool("VNCSM_INCLUDE_TRACEBACK", False),
        )

    @property
    def resolved_server_dir(self) -> str:
        """Installation directory after override/env/default resolution."""
        return resolve_server_dir(self.server_dir)

    @property
    def resolved_server_args(self) -> str | None:
        """Extra start arguments after override/env resolution."""
        return resolve_server_args(self.server_args)

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get integer from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

    @classmethod
    def _get_positive_int(cls, key: str, default: int) -> int:
        value = cls._get_int(key, default)
        if value <= 0:
            logger.warning("%s must be > 0, got %d. Using default: %d", key, value, default)
            return default
        return value

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Boolean value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _get_transport() -> str:
        """Get transport from environment with validation.

        Returns:
            Transport type ("http" or "stdio")
        """
        transport = os.getenv("VNCSM_TRANSPORT", "").lower()
        if transport in ("http", "stdio"):
            return transport
        return "http"
