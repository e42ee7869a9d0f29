"""Remote command data models."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RemoteCommand:
    """A single command line to execute on a remote host."""

    command: str
    host: str


@dataclass
class CommandResult:
    """Result of a remote command execution.

    Attributes:
        exit_status: Exit status reported by the remote side
        stdout: Standard output, split into lines
        stderr: Diagnostic lines (capped, see runner)
        first_error_line: First non-empty line seen on either stream
    """

    exit_status: int
    stdout: list[str] = field(default_factory=list)
    stderr: list[str] = field(default_factory=list)
    first_error_line: str | None = None

    @property
    def first_stdout_line(self) -> str | None:
        """First line of standard output, or None if there was none."""
        return self.stdout[0] if self.stdout else None


@dataclass
class Attempt(Generic[T]):
    """Outcome of an operation whose failure is not fatal to the caller."""

    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        """Whether the operation completed without error."""
        return self.error is None
