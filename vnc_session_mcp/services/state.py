"""Process-wide dependency state for the MCP tools.

Only configuration and the connection pool live here. Per-flow state
(credentials, error presentation) belongs to SessionContext.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vnc_session_mcp.dependencies import Dependencies

_deps: "Dependencies | None" = None


def get_deps() -> "Dependencies":
    """Get or create the shared dependencies."""
    from vnc_session_mcp.dependencies import Dependencies

    global _deps
    if _deps is None:
        _deps = Dependencies.create()
    return _deps


def set_deps(deps: "Dependencies | None") -> None:
    """Replace the shared dependencies (None resets them).

    Allows the server lifespan and tests to inject their own instance.
    """
    global _deps
    _deps = deps
