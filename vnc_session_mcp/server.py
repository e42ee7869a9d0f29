"""VNC Session MCP FastMCP server.

A thin wrapper that wires the MCP server to the session tools. Session logic
lives in services/, tool formatting in tools/.
"""

import logging
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from vnc_session_mcp.config import Settings
from vnc_session_mcp.dependencies import Dependencies
from vnc_session_mcp.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from vnc_session_mcp.services import set_deps
from vnc_session_mcp.tools import (
    vnc_connect,
    vnc_hosts,
    vnc_kill,
    vnc_list,
    vnc_otp,
    vnc_start,
)
from vnc_session_mcp.utils.console import MCPRequestFormatter

NOISY_LOGGERS = [
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "asyncssh",
    "httpx",
    "httpcore",
    "fastmcp",
    "starlette",
    "anyio",
]


def _configure_logging() -> None:
    """Configure colorful logging for the vnc_session_mcp package.

    Called at import time so loggers are configured however the server is
    started.
    """
    log_level = Settings.from_env().log_level.upper()
    use_colors = os.getenv("VNCSM_LOG_COLORS", "true").lower() != "false"
    if not sys.stderr.isatty():
        use_colors = False

    package_logger = logging.getLogger("vnc_session_mcp")
    package_logger.setLevel(getattr(logging, log_level, logging.INFO))

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(MCPRequestFormatter(use_colors=use_colors))
        package_logger.addHandler(handler)
        package_logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Create shared dependencies at startup and close connections at shutdown.

    Args:
        server: The FastMCP server instance

    Yields:
        Dict with configured host names
    """
    logger.info("VNC Session MCP server starting up")

    deps = Dependencies.create()
    set_deps(deps)

    hosts = deps.config.get_hosts()
    logger.info(
        "Loaded %d SSH host(s): %s",
        len(hosts),
        ", ".join(sorted(hosts)) if hosts else "(none)",
    )
    logger.info(
        "TurboVNC Server directory %s, auto one-time passwords %s",
        deps.config.server_dir,
        "on" if deps.config.auto_otp else "off",
    )
    logger.info("VNC Session MCP server ready to accept connections")

    try:
        yield {"hosts": list(hosts)}
    finally:
        logger.info("VNC Session MCP server shutting down")
        if deps.pool.pool_size > 0:
            logger.info(
                "Closing %d active SSH connection(s): %s",
                deps.pool.pool_size,
                ", ".join(deps.pool.active_hosts),
            )
        await deps.cleanup()
        set_deps(None)
        logger.info("VNC Session MCP server shutdown complete")


def configure_middleware(server: FastMCP) -> None:
    """Add error handling and logging middleware (first added = innermost).

    Environment variables:
        VNCSM_SLOW_THRESHOLD_MS: Threshold for slow call warnings (default: 1000)
        VNCSM_INCLUDE_TRACEBACK: Set to "true" (or 1/yes/on) to include tracebacks in error logs
    """
    slow_threshold = float(os.getenv("VNCSM_SLOW_THRESHOLD_MS", "1000"))
    settings = Settings.from_env()

    server.add_middleware(
        ErrorHandlingMiddleware(include_traceback=settings.include_traceback)
    )
    server.add_middleware(LoggingMiddleware(slow_threshold_ms=slow_threshold))


def create_server() -> FastMCP:
    """Create and configure the MCP server with middleware and tools.

    Returns:
        Configured FastMCP server instance
    """
    server = FastMCP("vnc_session_mcp", lifespan=app_lifespan)

    configure_middleware(server)

    for tool in (vnc_hosts, vnc_list, vnc_start, vnc_kill, vnc_otp, vnc_connect):
        server.tool(tool)

    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> PlainTextResponse:
        """Health check endpoint."""
        client_host = request.client.host if request.client else "unknown"
        logger.debug("Health check from %s", client_host)
        return PlainTextResponse("OK")

    return server


# Default server instance
mcp = create_server()
