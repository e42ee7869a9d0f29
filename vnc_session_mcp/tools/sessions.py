"""MCP tools for managing TurboVNC sessions on SSH hosts."""

import logging
from typing import TYPE_CHECKING

from vnc_session_mcp.services import (
    CollectingErrorPresenter,
    CredentialStore,
    HostConnectionError,
    SessionContext,
    attempt,
    create_session,
    generate_otp,
    get_deps,
    kill_session,
    list_sessions,
    open_host_connection,
    start_session,
)
from vnc_session_mcp.tools.pickers import ScriptedPicker
from vnc_session_mcp.utils.validation import validate_host, validate_session_id

if TYPE_CHECKING:
    import asyncssh

logger = logging.getLogger(__name__)


async def _open_host(
    host: str,
) -> tuple["asyncssh.SSHClientConnection | None", str | None]:
    """Resolve a configured host and connect, returning (connection, error)."""
    deps = get_deps()
    try:
        host = validate_host(host)
    except ValueError as e:
        return None, f"Error: {e}"

    ssh_host = deps.config.get_host(host)
    if ssh_host is None:
        available = ", ".join(sorted(deps.config.get_hosts())) or "(none)"
        return None, f"Error: Unknown host '{host}'. Available: {available}"

    try:
        conn = await open_host_connection(deps.pool, ssh_host)
    except HostConnectionError as e:
        return None, f"Error: {e}"
    return conn, None


def _format_selection(host: str, session_id: str, credentials: CredentialStore) -> str:
    lines = [f"Session {session_id} on {host}"]
    if credentials.credential is not None:
        lines.append(f"One-time password: {credentials.credential}")
    return "\n".join(lines)


async def vnc_hosts() -> str:
    """List the SSH hosts TurboVNC sessions can be managed on."""
    hosts = get_deps().config.get_hosts()
    if not hosts:
        return "No SSH hosts configured."

    lines = ["Available hosts:"]
    for name, ssh_host in sorted(hosts.items()):
        lines.append(f"  {name} -> {ssh_host.address}")
    return "\n".join(lines)


async def vnc_list(host: str) -> str:
    """List TurboVNC sessions running on a host.

    Args:
        host: SSH host name from ~/.ssh/config
    """
    conn, error = await _open_host(host)
    if error:
        return error
    assert conn is not None

    config = get_deps().config
    sessions = await list_sessions(
        conn, host, server_dir=config.server_dir, timeout=config.command_timeout
    )
    if not sessions:
        return f"No TurboVNC sessions running on {host}."
    return "\n".join([f"TurboVNC sessions on {host}:", *(f"  {s}" for s in sessions)])


async def vnc_start(host: str) -> str:
    """Start a new TurboVNC session on a host.

    A one-time password is generated for it when VNCSM_AUTO_OTP is enabled.

    Args:
        host: SSH host name from ~/.ssh/config
    """
    conn, error = await _open_host(host)
    if error:
        return error
    assert conn is not None

    config = get_deps().config
    session_id = await start_session(
        conn,
        host,
        server_dir=config.server_dir,
        server_args=config.server_args,
        timeout=config.command_timeout,
    )

    credentials = CredentialStore()
    if config.auto_otp:
        outcome = await attempt(
            generate_otp(
                conn,
                host,
                session_id,
                credentials,
                server_dir=config.server_dir,
                timeout=config.command_timeout,
            )
        )
        if not outcome.ok:
            logger.warning("One-time password generation failed: %s", outcome.error)
    return _format_selection(host, session_id, credentials)


async def vnc_kill(host: str, session: str) -> str:
    """Kill a TurboVNC session.

    Args:
        host: SSH host name from ~/.ssh/config
        session: Session identifier as shown by vnc_list (e.g. ":1")
    """
    try:
        session = validate_session_id(session)
    except ValueError as e:
        return f"Error: {e}"

    conn, error = await _open_host(host)
    if error:
        return error
    assert conn is not None

    config = get_deps().config
    await kill_session(
        conn, host, session, server_dir=config.server_dir, timeout=config.command_timeout
    )
    return f"Killed TurboVNC session {session} on {host}"


async def vnc_otp(host: str, session: str) -> str:
    """Generate a one-time password for a TurboVNC session.

    Args:
        host: SSH host name from ~/.ssh/config
        session: Session identifier as shown by vnc_list (e.g. ":1")
    """
    try:
        session = validate_session_id(session)
    except ValueError as e:
        return f"Error: {e}"

    conn, error = await _open_host(host)
    if error:
        return error
    assert conn is not None

    config = get_deps().config
    credential = await generate_otp(
        conn,
        host,
        session,
        CredentialStore(),
        server_dir=config.server_dir,
        timeout=config.command_timeout,
    )
    if credential is None:
        return f"Error: TurboVNC Server on {host} printed no one-time password"
    return f"One-time password for {session} on {host}: {credential}"


async def vnc_connect(host: str, actions: list[str] | None = None) -> str:
    """Choose a TurboVNC session to connect to.

    Lists the sessions on the host and applies ``actions`` in order, one per
    listing. If no session is running the first time, a new one is started.
    When the actions run out the selection is cancelled.

    Args:
        host: SSH host name from ~/.ssh/config
        actions: Decisions such as "connect::1", "kill::2", "new" or "cancel"

    Examples:
        vnc_connect("tootie") - start a session if none is running
        vnc_connect("tootie", ["connect::1"]) - connect to display :1
        vnc_connect("tootie", ["kill::1", "new"]) - replace :1 with a new session
    """
    try:
        picker = ScriptedPicker.from_actions(actions or [])
    except ValueError as e:
        return f"Error: {e}"

    conn, error = await _open_host(host)
    if error:
        return error
    assert conn is not None

    credentials = CredentialStore()
    ctx = SessionContext.from_config(
        get_deps().config, conn, host, picker, errors=CollectingErrorPresenter()
    )
    ctx.credentials = credentials

    session_id = await create_session(ctx)
    if session_id is None:
        sessions = picker.seen[-1] if picker.seen else []
        listing = ", ".join(sessions) if sessions else "none"
        return f"Session selection on {host} cancelled (running sessions: {listing})"
    return _format_selection(host, session_id, credentials)
