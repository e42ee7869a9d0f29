"""Colorful console logging formatter."""

import logging
import re
from datetime import datetime

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "white": "\033[37m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

PACKAGE_PREFIX = "vnc_session_mcp."

# Longest prefix first
COMPONENT_COLORS = {
    "vnc_session_mcp.services.runner": COLORS["bright_blue"],
    "vnc_session_mcp.services.pool": COLORS["bright_magenta"],
    "vnc_session_mcp.services": COLORS["bright_cyan"],
    "vnc_session_mcp.tools": COLORS["cyan"],
    "vnc_session_mcp.middleware": COLORS["yellow"],
    "vnc_session_mcp.config": COLORS["green"],
}

_DURATION = re.compile(r"(\d+\.?\d*ms)")
_SSH_ADDRESS = re.compile(r"(\w+@[\w.\-]+:\d+)")
_BANNER = re.compile(r"^=+$")


class ColorfulFormatter(logging.Formatter):
    """Log formatter with fixed-width columns and optional ANSI colors."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
        """
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created)
        return f"{dt:%H:%M:%S}.{int(record.msecs):03d} {dt:%m/%d}"

    def _format_component(self, record: logging.LogRecord) -> str:
        name = record.name.removeprefix(PACKAGE_PREFIX)
        color = COLORS["white"]
        for prefix, prefix_color in COMPONENT_COLORS.items():
            if record.name.startswith(prefix):
                color = prefix_color
                break
        return self._colorize(f"{name:<20}", color)

    def _highlight_message(self, message: str) -> str:
        if not self.use_colors:
            return message
        if _BANNER.match(message):
            return self._colorize(message, COLORS["dim"])
        message = _DURATION.sub(f"{COLORS['bright_yellow']}\\1{COLORS['reset']}", message)
        return _SSH_ADDRESS.sub(f"{COLORS['bright_magenta']}\\1{COLORS['reset']}", message)

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as ``time | LEVEL | component | message``."""
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        level = self._colorize(
            f"{record.levelname:<8}", LEVEL_COLORS.get(record.levelname, COLORS["white"])
        )
        component = self._format_component(record)
        sep = self._colorize("|", COLORS["dim"])
        message = self._highlight_message(record.getMessage())

        line = f"{timestamp} {sep} {level} {sep} {component} {sep} {message}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class MCPRequestFormatter(ColorfulFormatter):
    """Formatter that prefixes tool traffic and lifecycle events with a marker."""

    MARKERS = (
        ((">>>",), ">", "bright_cyan"),
        (("<<<",), "<", "bright_green"),
        (("!!!", "error", "failed", "could not"), "!!", "bright_red"),
        (("warning", "slow"), "!", "bright_yellow"),
        (("starting", "ready"), "+", "bright_green"),
        (("shutting down", "closing", "removing", "killing"), "-", "bright_yellow"),
    )

    def format(self, record: logging.LogRecord) -> str:
        """Format with a leading marker column."""
        base = super().format(record)
        if not self.use_colors:
            return base

        message = record.getMessage().lower()
        for needles, marker, color in self.MARKERS:
            if any(needle in message for needle in needles):
                return f"{self._colorize(f'{marker:<3}', COLORS[color])} {base}"
        return f"    {base}"
