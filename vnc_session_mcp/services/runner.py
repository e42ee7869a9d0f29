"""Remote command execution over an open SSH connection.

Each call opens one exec channel, reads standard output to completion, then
reads standard error line by line. Diagnostic lines are forwarded to the
logger as they arrive, framed by a banner, and at most STDERR_LINE_LIMIT of
them are kept. Output is decoded as UTF-8 with undecodable bytes replaced.
The channel is always closed before returning.
"""

import asyncio
import logging

import asyncssh

from vnc_session_mcp.models import CommandResult, RemoteCommand
from vnc_session_mcp.services.errors import (
    CommandTimeoutError,
    ExecutionError,
    RemoteCommandFailed,
    ServerNotInstalled,
)

logger = logging.getLogger(__name__)

STDERR_LINE_LIMIT = 20
COMMAND_NOT_FOUND = 127
BANNER = "=" * 79


def _first_non_empty(*streams: list[str]) -> str | None:
    for lines in streams:
        for line in lines:
            if line.strip():
                return line
    return None


async def _read_stderr(
    process: "asyncssh.SSHClientProcess[str]",
    log: logging.Logger,
) -> list[str]:
    """Read diagnostic lines, keeping and logging only the first few.

    Lines past the limit are read and discarded so the remote side can
    finish writing.
    """
    lines: list[str] = []
    while True:
        line = await process.stderr.readline()
        if not line:
            break
        if len(lines) >= STDERR_LINE_LIMIT:
            continue
        line = line.rstrip("\r\n")
        if not lines:
            log.debug(BANNER)
            log.debug("SERVER WARNINGS/NOTIFICATIONS:")
        log.debug(line)
        lines.append(line)

    if lines:
        log.debug(BANNER)
    return lines


async def _collect(
    conn: "asyncssh.SSHClientConnection",
    invocation: RemoteCommand,
    log: logging.Logger,
) -> CommandResult:
    try:
        process = await conn.create_process(
            invocation.command, encoding="utf-8", errors="replace"
        )
    except (asyncssh.Error, OSError) as e:
        raise ExecutionError(invocation.command, invocation.host, e) from e

    try:
        output = await process.stdout.read()
        stdout = output.splitlines() if output else []
        stderr = await _read_stderr(process, log)
        await process.wait_closed()
    except (asyncssh.Error, OSError) as e:
        raise ExecutionError(invocation.command, invocation.host, e) from e
    finally:
        process.close()

    # returncode is None when the channel closed without an exit status
    exit_status = process.returncode
    if exit_status is None:
        exit_status = -1

    return CommandResult(
        exit_status=exit_status,
        stdout=stdout,
        stderr=stderr,
        first_error_line=_first_non_empty(stdout, stderr),
    )


async def execute(
    conn: "asyncssh.SSHClientConnection",
    invocation: RemoteCommand,
    timeout: float | None = None,
    log: logging.Logger | None = None,
) -> CommandResult:
    """Execute a command and capture its output without checking the status.

    Args:
        conn: Open SSH connection (borrowed, never closed here)
        invocation: Command line and host name
        timeout: Seconds to wait for the command, or None for no deadline
        log: Logger receiving diagnostic lines (default: module logger)

    Returns:
        CommandResult with exit status and captured lines

    Raises:
        ExecutionError: If the channel cannot be opened or the transport fails
        CommandTimeoutError: If the deadline expires
    """
    log = log or logger
    log.debug("Executing on %s: %s", invocation.host, invocation.command)

    try:
        return await asyncio.wait_for(_collect(conn, invocation, log), timeout)
    except asyncio.TimeoutError as e:
        raise CommandTimeoutError(
            invocation.command, invocation.host, timeout or 0
        ) from e


def check_exit_status(
    result: CommandResult,
    invocation: RemoteCommand,
    server_dir: str,
) -> None:
    """Raise the error matching a non-zero exit status.

    Raises:
        ServerNotInstalled: If the status is 127 (command not found)
        RemoteCommandFailed: For any other non-zero status
    """
    if result.exit_status == COMMAND_NOT_FOUND:
        raise ServerNotInstalled(invocation.command, invocation.host, server_dir)
    if result.exit_status != 0:
        raise RemoteCommandFailed(
            invocation.command,
            invocation.host,
            result.exit_status,
            result.first_error_line,
        )


async def run_remote_command(
    conn: "asyncssh.SSHClientConnection",
    invocation: RemoteCommand,
    server_dir: str,
    timeout: float | None = None,
    log: logging.Logger | None = None,
) -> CommandResult:
    """Execute a TurboVNC Server command and require a zero exit status.

    Args:
        conn: Open SSH connection
        invocation: Command line and host name
        server_dir: Installation directory the command was built from
        timeout: Seconds to wait for the command, or None for no deadline
        log: Logger receiving diagnostic lines

    Returns:
        CommandResult of the successful command (stdout may be empty)

    Raises:
        ExecutionError: Channel or transport failure
        ServerNotInstalled: Exit status 127
        RemoteCommandFailed: Any other non-zero exit status
    """
    result = await execute(conn, invocation, timeout=timeout, log=log)
    check_exit_status(result, invocation, server_dir)
    return result
