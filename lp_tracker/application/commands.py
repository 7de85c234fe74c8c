"""Command invocations and their results."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from ..core.enums import ErrorKind, Outcome


@dataclass(frozen=True)
class CommandInvocation:
    """A user command delivered by the front-end.

    ``add_player`` carries the ``pseudo``, ``tagline`` and ``server`` options;
    ``list_players`` carries none.
    """

    name: str
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Detach from the caller's dict so later edits cannot reach an admitted command
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def option(self, key: str, default: str = "") -> str:
        value = self.options.get(key, default)
        return str(value) if value is not None else default


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of an admitted command, produced exactly once."""

    outcome: Outcome
    value: Any = None
    error: Optional[BaseException] = None
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def success(cls, value: Any) -> "ExecutionResult":
        return cls(outcome=Outcome.SUCCESS, value=value)

    @classmethod
    def failure(cls, error: BaseException, kind: ErrorKind) -> "ExecutionResult":
        return cls(outcome=Outcome.FAILURE, error=error, error_kind=kind)

    @classmethod
    def timeout(cls) -> "ExecutionResult":
        return cls(outcome=Outcome.TIMEOUT)


@dataclass(frozen=True)
class CommandResponse:
    """User facing response emitted for one admitted command."""

    command: str
    outcome: Outcome
    content: str
    error_kind: Optional[ErrorKind] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "command": self.command,
            "outcome": self.outcome.value,
            "content": self.content,
        }
        if self.error_kind is not None:
            data["error_kind"] = self.error_kind.value
        return data
