"""Errors raised while managing remote TurboVNC sessions."""


class SessionManagerError(Exception):
    """Base class for session manager failures.

    Attributes:
        command: Command line that was being executed
        host: Host the command was executed on
    """

    def __init__(self, message: str, command: str = "", host: str = ""):
        self.command = command
        self.host = host
        super().__init__(message)


class ExecutionError(SessionManagerError):
    """The exec channel could not be opened or the transport broke."""

    def __init__(self, command: str, host: str, original_error: Exception):
        """Initialize execution error.

        Args:
            command: Command line that was being executed
            host: Host the command was executed on
            original_error: Transport exception that caused the failure
        """
        self.original_error = original_error
        super().__init__(
            f"Could not execute\n    {command}\non host {host}: {original_error}",
            command=command,
            host=host,
        )


class CommandTimeoutError(ExecutionError):
    """The remote command did not finish before its deadline."""

    def __init__(self, command: str, host: str, timeout: float):
        self.timeout = timeout
        super().__init__(
            command,
            host,
            TimeoutError(f"no result after {timeout:g}s"),
        )


class ServerNotInstalled(SessionManagerError):
    """The remote shell could not find the TurboVNC Server (exit 127)."""

    def __init__(self, command: str, host: str, server_dir: str):
        self.server_dir = server_dir
        super().__init__(
            f"Could not execute\n    {command}\non host {host}.\n"
            f"Is the TurboVNC Server installed in {server_dir} ?",
            command=command,
            host=host,
        )


class RemoteCommandFailed(SessionManagerError):
    """The remote command exited with a non-zero status other than 127."""

    def __init__(
        self,
        command: str,
        host: str,
        exit_status: int,
        detail: str | None = None,
    ):
        self.exit_status = exit_status
        self.detail = detail
        message = f"Could not execute\n    {command}\non host {host}"
        if detail is not None:
            message += f":\n    {detail}"
        super().__init__(message, command=command, host=host)


class UnparsableServerOutput(SessionManagerError):
    """The command succeeded but its output did not contain a result."""

    def __init__(self, command: str = "", host: str = ""):
        super().__init__(
            "Could not parse TurboVNC Server output", command=command, host=host
        )
