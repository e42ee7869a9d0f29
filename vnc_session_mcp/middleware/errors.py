"""Error handling middleware for consistent tool errors."""

import logging
import traceback
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from fastmcp.exceptions import ToolError
from fastmcp.server.middleware import MiddlewareContext

from vnc_session_mcp.middleware.base import SessionMiddleware
from vnc_session_mcp.services.errors import ServerNotInstalled, SessionManagerError

ErrorCallback = Callable[[Exception, MiddlewareContext], None]


def describe_error(error: SessionManagerError) -> str:
    """Message for a client, with a configuration hint where one helps."""
    message = str(error)
    if isinstance(error, ServerNotInstalled):
        message += (
            "\nSet VNCSM_SERVER_DIR (or TVNC_SERVERDIR) to the TurboVNC Server "
            "installation directory on the host."
        )
    return message


class ErrorHandlingMiddleware(SessionMiddleware):
    """Logs errors, counts them per type, and turns session errors into tool errors.

    Example:
        >>> middleware = ErrorHandlingMiddleware(include_traceback=True)
        >>> mcp.add_middleware(middleware)
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_traceback: bool = False,
        error_callback: ErrorCallback | None = None,
    ) -> None:
        """Initialize error handling middleware.

        Args:
            logger: Optional custom logger.
            include_traceback: Whether to include full traceback in logs.
            error_callback: Optional callback receiving (exception, context).
        """
        super().__init__(logger=logger)
        self.include_traceback = include_traceback
        self.error_callback = error_callback
        self._error_counts: dict[str, int] = defaultdict(int)

    def get_error_stats(self) -> dict[str, int]:
        """Get error counts by exception type name."""
        return dict(self._error_counts)

    def reset_stats(self) -> None:
        """Reset error statistics."""
        self._error_counts.clear()

    def _record(self, error: Exception, context: MiddlewareContext) -> None:
        error_type = type(error).__name__
        self._error_counts[error_type] += 1

        if self.include_traceback:
            self.logger.error(
                "Error in %s: %s: %s\n%s",
                context.method,
                error_type,
                error,
                traceback.format_exc(),
            )
        else:
            self.logger.error("Error in %s: %s: %s", context.method, error_type, error)

        if self.error_callback:
            try:
                self.error_callback(error, context)
            except Exception as callback_error:
                self.logger.warning("Error callback failed: %s", callback_error)

    async def on_call_tool(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Run the tool, converting session errors into ToolError.

        Raises:
            ToolError: For SessionManagerError, with the actionable message
            Exception: Any other error, re-raised unchanged after logging
        """
        try:
            return await call_next(context)
        except SessionManagerError as e:
            self._record(e, context)
            raise ToolError(describe_error(e)) from e
        except Exception as e:
            self._record(e, context)
            raise
