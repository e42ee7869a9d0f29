"""Session selection loop.

Lists the sessions on a host, lets the picker decide, and repeats until the
user connects or cancels::

    Listing -> AwaitingDecision -> Connecting  (ConnectNew / ConnectExisting)
                                -> Cancelled   (Cancel)
                                -> Killing -> Listing  (KillExisting)

If the very first listing is empty a new session is started without asking
the picker. Later empty listings always go to the picker.
"""

import logging
from collections.abc import Awaitable
from typing import TypeVar

from vnc_session_mcp.models import (
    Attempt,
    Cancel,
    ConnectExisting,
    ConnectNew,
    KillExisting,
)
from vnc_session_mcp.services.context import SessionContext
from vnc_session_mcp.services.errors import SessionManagerError
from vnc_session_mcp.services.sessions import (
    generate_otp,
    kill_session,
    list_sessions,
    start_session,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


async def attempt(operation: Awaitable[T]) -> Attempt[T]:
    """Await an operation, returning its session error instead of raising."""
    try:
        return Attempt(value=await operation)
    except SessionManagerError as e:
        return Attempt(error=e)


async def _provision_otp(ctx: SessionContext, session_id: str) -> None:
    if not ctx.auto_otp:
        return

    outcome = await attempt(
        generate_otp(
            ctx.conn,
            ctx.host,
            session_id,
            ctx.credentials,
            server_dir=ctx.server_dir,
            errors=ctx.errors,
            timeout=ctx.timeout,
            log=ctx.log,
        )
    )
    if not outcome.ok:
        ctx.log.warning(
            "One-time password generation failed for session %s%s: %s",
            ctx.host,
            session_id,
            outcome.error,
        )


async def _connect_new(ctx: SessionContext) -> str:
    session_id = await start_session(
        ctx.conn,
        ctx.host,
        server_dir=ctx.server_dir,
        server_args=ctx.server_args,
        timeout=ctx.timeout,
        log=ctx.log,
    )
    await _provision_otp(ctx, session_id)
    return session_id


async def _kill(ctx: SessionContext, session_id: str) -> None:
    outcome = await attempt(
        kill_session(
            ctx.conn,
            ctx.host,
            session_id,
            server_dir=ctx.server_dir,
            errors=ctx.errors,
            timeout=ctx.timeout,
            log=ctx.log,
        )
    )
    if not outcome.ok:
        ctx.log.warning(
            "Could not kill session %s%s: %s", ctx.host, session_id, outcome.error
        )


async def _select(ctx: SessionContext) -> str | None:
    first_time = True
    while True:
        sessions = await list_sessions(
            ctx.conn,
            ctx.host,
            server_dir=ctx.server_dir,
            timeout=ctx.timeout,
            log=ctx.log,
        )

        if first_time and not sessions:
            return await _connect_new(ctx)
        first_time = False

        decision = await ctx.picker.present(sessions, ctx.host)

        if isinstance(decision, Cancel):
            ctx.log.info("Session selection on %s cancelled", ctx.host)
            return None
        if isinstance(decision, ConnectNew):
            return await _connect_new(ctx)
        if isinstance(decision, ConnectExisting):
            await _provision_otp(ctx, decision.session_id)
            return decision.session_id
        if isinstance(decision, KillExisting):
            await _kill(ctx, decision.session_id)
            continue

        raise TypeError(f"Unknown selection decision: {decision!r}")


async def create_session(ctx: SessionContext) -> str | None:
    """Choose, start or kill sessions until the user connects or cancels.

    Credential and kill failures are logged and do not end the loop.
    Listing and start failures are presented and re-raised.

    Args:
        ctx: Connection, picker and collaborators for this flow

    Returns:
        Identifier of the session to connect to, or None if cancelled

    Raises:
        SessionManagerError: If listing or starting sessions fails
    """
    ctx.log.debug("Managing TurboVNC sessions on host %s", ctx.host)
    try:
        session_id = await _select(ctx)
    except SessionManagerError as e:
        ctx.errors.present(e)
        raise

    if session_id is not None:
        ctx.log.info("Selected TurboVNC session %s%s", ctx.host, session_id)
    return session_id
