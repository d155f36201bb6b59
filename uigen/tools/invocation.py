"""
Invocation tracking - one stateful record per agent-issued tool call.

Lifecycle:
    pending --(dispatch begins)--> running --(handler returns)--> result
                                           --(handler fails)----> error

pending -> running -> terminal is the only legal path. Once terminal, an
invocation never changes again.

For display, pending and running both show as "call" and either terminal
state shows as "result", which is what the progress view consumes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from uigen.constants import EDITOR_TOOL, FILE_MANAGER_TOOL

if TYPE_CHECKING:
    from uigen.errors import ToolError
    from uigen.tools.commands import Command


class InvocationState(str, Enum):
    """Invocation lifecycle state."""

    PENDING = "pending"
    RUNNING = "running"
    RESULT = "result"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (InvocationState.RESULT, InvocationState.ERROR)


class InvalidTransitionError(RuntimeError):
    """An invocation was driven outside pending -> running -> terminal."""


_EDITOR_LABELS = {
    "create": "Created",
    "str_replace": "Edited",
    "insert": "Edited",
    "view": "Viewed",
    "undo_edit": "Reverted",
}


def summarize(tool_name: str, args: Any) -> str:
    """
    Human-readable description of a tool call.

    Depends only on the call itself, never on its outcome, so it is available
    while the invocation is still pending. Unknown tools, commands, or calls
    without a path fall back to the tool name.
    """
    if not isinstance(args, dict):
        return tool_name

    command = args.get("command")
    path = args.get("path")
    if not isinstance(command, str) or not isinstance(path, str) or not path:
        return tool_name

    if tool_name == EDITOR_TOOL and command in _EDITOR_LABELS:
        return f"{_EDITOR_LABELS[command]} {path}"

    if tool_name == FILE_MANAGER_TOOL:
        if command == "rename":
            new_path = args.get("new_path")
            if not isinstance(new_path, str):
                return f"Renamed {path}"
            return f"Renamed {path} → {new_path}"
        if command == "delete":
            return f"Deleted {path}"

    return tool_name


@dataclass
class Invocation:
    """The tracked execution of one tool call."""

    id: int
    tool_name: str
    args: Any
    summary: str = ""
    command: "Command | None" = None
    state: InvocationState = InvocationState.PENDING
    outcome: dict[str, Any] | None = None
    _history: list[InvocationState] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.summary:
            self.summary = summarize(self.tool_name, self.args)
        self._history.append(self.state)

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    @property
    def succeeded(self) -> bool:
        return self.state == InvocationState.RESULT

    @property
    def transitions(self) -> tuple[InvocationState, ...]:
        """Every state this invocation has been in, in order."""
        return tuple(self._history)

    def _transition(self, expected: InvocationState, new_state: InvocationState) -> None:
        if self.state != expected:
            raise InvalidTransitionError(
                f"Invocation {self.id}: cannot move to {new_state.value} from {self.state.value}"
            )
        self.state = new_state
        self._history.append(new_state)

    def start(self, command: "Command | None" = None) -> None:
        """pending -> running"""
        self._transition(InvocationState.PENDING, InvocationState.RUNNING)
        self.command = command

    def succeed(self, outcome: dict[str, Any]) -> None:
        """running -> result"""
        self._transition(InvocationState.RUNNING, InvocationState.RESULT)
        self.outcome = outcome

    def fail(self, error: "ToolError") -> None:
        """running -> error"""
        self._transition(InvocationState.RUNNING, InvocationState.ERROR)
        self.outcome = error.to_dict()

    @property
    def error_kind(self) -> str | None:
        """Taxonomy kind of a failed invocation, None otherwise."""
        if self.state != InvocationState.ERROR or self.outcome is None:
            return None
        kind: str | None = self.outcome.get("error")
        return kind

    def to_display(self) -> dict[str, Any]:
        """Shape consumed by the progress display: {toolName, args, state, summary, result?}"""
        display: dict[str, Any] = {
            "toolName": self.tool_name,
            "args": self.args,
            "state": "result" if self.is_terminal else "call",
            "summary": self.summary,
        }
        if self.is_terminal:
            display["result"] = self.outcome
        return display

    def to_tool_result(self) -> dict[str, Any]:
        """Result message fed back to the agent for this call."""
        assert self.is_terminal, f"Invocation {self.id} has no result yet"
        assert self.outcome is not None
        return {"id": self.id, **self.outcome}
