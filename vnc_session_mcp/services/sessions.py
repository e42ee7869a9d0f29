"""TurboVNC Server session operations.

Each operation runs one fixed ``vncserver``/``vncpasswd`` command through
the remote command runner and interprets its output.
"""

import logging
from typing import TYPE_CHECKING

from vnc_session_mcp.config import resolve_server_args, resolve_server_dir
from vnc_session_mcp.models import RemoteCommand
from vnc_session_mcp.protocols import CredentialSink, ErrorPresenter
from vnc_session_mcp.services.context import suppressed_errors
from vnc_session_mcp.services.errors import UnparsableServerOutput
from vnc_session_mcp.services.runner import run_remote_command
from vnc_session_mcp.utils.parser import (
    parse_credential_line,
    parse_session_list,
    parse_start_output,
)
from vnc_session_mcp.utils.shell import join_command, quote_arg

if TYPE_CHECKING:
    import asyncssh

logger = logging.getLogger(__name__)


def _vncserver(server_dir: str) -> str:
    return quote_arg(f"{server_dir}/bin/vncserver")


def _vncpasswd(server_dir: str) -> str:
    return quote_arg(f"{server_dir}/bin/vncpasswd")


def session_list_command(server_dir: str) -> str:
    """Command listing running sessions."""
    return join_command(_vncserver(server_dir), "-sessionlist")


def session_start_command(server_dir: str, server_args: str | None = None) -> str:
    """Command starting a new session.

    Extra arguments come from trusted configuration and are appended as is.
    """
    return join_command(_vncserver(server_dir), "-sessionstart", server_args or "")


def otp_command(server_dir: str, session_id: str) -> str:
    """Command generating a one-time password for a session."""
    return join_command(
        _vncpasswd(server_dir), "-o", "-display", quote_arg(session_id)
    )


def session_kill_command(server_dir: str, session_id: str) -> str:
    """Command killing a session."""
    return join_command(_vncserver(server_dir), "-kill", quote_arg(session_id))


async def list_sessions(
    conn: "asyncssh.SSHClientConnection",
    host: str,
    server_dir: str | None = None,
    timeout: float | None = None,
    log: logging.Logger | None = None,
) -> list[str]:
    """List sessions running on a host.

    Args:
        conn: Open SSH connection to host
        host: Host name for messages
        server_dir: Explicit installation directory override
        timeout: Seconds to wait for the command
        log: Logger for server diagnostics

    Returns:
        Session identifiers in server order; empty if there is no output.
    """
    log = log or logger
    directory = resolve_server_dir(server_dir)
    invocation = RemoteCommand(session_list_command(directory), host)

    result = await run_remote_command(
        conn, invocation, directory, timeout=timeout, log=log
    )

    line = result.first_stdout_line
    log.debug("Available sessions: %s", line if line else "None")
    return parse_session_list(line)


async def start_session(
    conn: "asyncssh.SSHClientConnection",
    host: str,
    server_dir: str | None = None,
    server_args: str | None = None,
    timeout: float | None = None,
    log: logging.Logger | None = None,
) -> str:
    """Start a new session on a host.

    Returns:
        Identifier of the new session

    Raises:
        UnparsableServerOutput: If the command succeeded but printed no
            session identifier
    """
    log = log or logger
    log.info("Starting new TurboVNC session on host %s", host)

    directory = resolve_server_dir(server_dir)
    command = session_start_command(directory, resolve_server_args(server_args))
    invocation = RemoteCommand(command, host)

    result = await run_remote_command(
        conn, invocation, directory, timeout=timeout, log=log
    )

    session_id = parse_start_output(result.first_stdout_line)
    if session_id is None:
        raise UnparsableServerOutput(command, host)

    log.info("Started TurboVNC session %s on host %s", session_id, host)
    return session_id


async def generate_otp(
    conn: "asyncssh.SSHClientConnection",
    host: str,
    session_id: str,
    credentials: CredentialSink,
    server_dir: str | None = None,
    errors: ErrorPresenter | None = None,
    timeout: float | None = None,
    log: logging.Logger | None = None,
) -> str | None:
    """Generate a one-time password for a session.

    The password is read from the first diagnostic line and written to
    ``credentials`` once the command has succeeded. Error presentation is
    suppressed while the command runs; errors are still raised.

    Returns:
        The one-time password, or None if the server printed none.
    """
    log = log or logger
    log.info("Generating one-time password for session %s%s", host, session_id)

    directory = resolve_server_dir(server_dir)
    invocation = RemoteCommand(otp_command(directory, session_id), host)

    with suppressed_errors(errors):
        result = await run_remote_command(
            conn, invocation, directory, timeout=timeout, log=log
        )

    if not result.stderr:
        log.warning("No one-time password printed for session %s%s", host, session_id)
        return None

    credential = parse_credential_line(result.stderr[0])
    if not credential:
        log.warning("Empty one-time password for session %s%s", host, session_id)
        return None

    credentials.set_credential(credential)
    return credential


async def kill_session(
    conn: "asyncssh.SSHClientConnection",
    host: str,
    session_id: str,
    server_dir: str | None = None,
    errors: ErrorPresenter | None = None,
    timeout: float | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Kill a session.

    Error presentation is suppressed while the command runs; errors are
    still raised.
    """
    log = log or logger
    log.info("Killing TurboVNC session %s%s", host, session_id)

    directory = resolve_server_dir(server_dir)
    invocation = RemoteCommand(session_kill_command(directory, session_id), host)

    with suppressed_errors(errors):
        await run_remote_command(
            conn, invocation, directory, timeout=timeout, log=log
        )
