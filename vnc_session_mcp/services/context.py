"""Per-invocation state for one session selection flow.

Nothing here is process-wide: every ``create_session`` call gets its own
credential store and error presenter, so flows against different hosts can
run concurrently without interfering.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from vnc_session_mcp.protocols import CredentialSink, ErrorPresenter, SessionPicker

if TYPE_CHECKING:
    import asyncssh

    from vnc_session_mcp.config import Config

logger = logging.getLogger(__name__)


@dataclass
class CredentialStore:
    """Credential sink that keeps the last one-time password in memory."""

    credential: str | None = field(default=None, repr=False)
    writes: int = 0

    def set_credential(self, credential: str) -> None:
        self.credential = credential
        self.writes += 1


class CollectingErrorPresenter:
    """Error presenter that only keeps the errors it was shown.

    Used under the MCP tools, where the error middleware reports the
    raised error to the client and the log.
    """

    def __init__(self) -> None:
        self.suppressed = False
        self.presented: list[Exception] = []

    def suppress(self, suppressed: bool) -> None:
        self.suppressed = suppressed

    def present(self, error: Exception) -> None:
        if not self.suppressed:
            self.presented.append(error)


class LoggingErrorPresenter(CollectingErrorPresenter):
    """Error presenter that reports errors through a logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        super().__init__()
        self.logger = logger or logging.getLogger(__name__)

    def present(self, error: Exception) -> None:
        if self.suppressed:
            self.logger.debug("Not presenting suppressed error: %s", error)
            return
        super().present(error)
        self.logger.error("%s", error)


@contextmanager
def suppressed_errors(presenter: ErrorPresenter | None) -> Iterator[None]:
    """Switch error presentation off for the duration of the block."""
    if presenter is None:
        yield
        return
    presenter.suppress(True)
    try:
        yield
    finally:
        presenter.suppress(False)


@dataclass
class SessionContext:
    """Everything one selection flow needs, passed explicitly.

    Attributes:
        conn: Open SSH connection to host (borrowed, never closed)
        host: Host name used in commands' error messages and logs
        picker: Collaborator that turns session lists into decisions
        server_dir: Explicit installation directory override
        server_args: Explicit extra start arguments override
        auto_otp: Generate a one-time password for the chosen session
        timeout: Deadline in seconds for each remote command
        credentials: Receives the one-time password
        errors: Presents fatal errors to the user
        log: Logger for progress and server diagnostics
    """

    conn: "asyncssh.SSHClientConnection"
    host: str
    picker: SessionPicker
    server_dir: str | None = None
    server_args: str | None = None
    auto_otp: bool = False
    timeout: float | None = None
    credentials: CredentialSink = field(default_factory=CredentialStore)
    errors: ErrorPresenter = field(default_factory=LoggingErrorPresenter)
    log: logging.Logger = field(default=logger)

    @classmethod
    def from_config(
        cls,
        config: "Config",
        conn: "asyncssh.SSHClientConnection",
        host: str,
        picker: SessionPicker,
        errors: ErrorPresenter | None = None,
    ) -> "SessionContext":
        """Build a context with server and timeout settings from config."""
        return cls(
            conn=conn,
            host=host,
            picker=picker,
            errors=errors or LoggingErrorPresenter(),
            server_dir=config.server_dir,
            server_args=config.server_args,
            auto_otp=config.auto_otp,
            timeout=config.command_timeout,
        )
