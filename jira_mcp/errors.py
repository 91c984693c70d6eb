"""Error taxonomy and the result type remote calls are folded into."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class JiraMcpError(RuntimeError):
    pass


class ToolArgumentError(JiraMcpError):
    """A tool argument is missing or cannot be coerced to its declared type."""

    def __init__(self, param: str, message: str) -> None:
        super().__init__(message)
        self.param = param


class UnknownToolError(JiraMcpError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class RemoteServiceError(JiraMcpError):
    """Jira answered with a non-2xx status."""

    def __init__(self, status_code: int, operation: str, target: str | None = None) -> None:
        where = f" for {target}" if target else ""
        super().__init__(f"Jira {operation}{where} failed with HTTP {status_code}")
        self.status_code = status_code
        self.operation = operation
        self.target = target


class JiraNotFoundError(RemoteServiceError):
    pass


class JiraUnreachableError(JiraMcpError):
    """Connection failure or timeout before Jira produced a response."""

    def __init__(self, operation: str, target: str | None = None, reason: str = "") -> None:
        where = f" for {target}" if target else ""
        super().__init__(f"Jira unreachable during {operation}{where}: {reason}")
        self.operation = operation
        self.target = target


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failed:
    error: Exception


def attempt(call: Callable[[], T]) -> "Ok[T] | Failed":
    """Run a remote call, folding any exception into a Failed result."""
    try:
        return Ok(call())
    except Exception as exc:
        return Failed(exc)
