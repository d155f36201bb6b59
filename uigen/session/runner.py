"""
SessionRunner - executes agent turns against one session's VFS.

A turn is the ordered batch of tool calls from one agent response. Calls run
strictly in order, one at a time; the agent protocol is request/reply per
call even though the transport streams. Once every call of a turn has a
terminal invocation, the snapshot goes to the preview bridge.

Observers (the chat view, a logger) connect to the Qt signals; a headless
runner simply has nothing connected.
"""

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from PySide6.QtCore import QObject, Signal

from uigen.tools.side_effects import SideEffect

if TYPE_CHECKING:
    from uigen.preview.bridge import PreviewBridge
    from uigen.tools.invocation import Invocation
    from uigen.tools.manager import ToolManager


class SessionState:
    """Session execution state."""

    IDLE = "idle"  # Ready for the next turn
    RUNNING = "running"  # Executing a turn's tool calls


@dataclass
class TurnResult:
    """What a turn did."""

    invocations: list["Invocation"] = field(default_factory=list)
    cancelled: bool = False
    discarded: int = 0  # Queued calls dropped by cancellation
    snapshot: dict[str, str] | None = None  # None when cancelled

    @property
    def failed(self) -> list["Invocation"]:
        return [inv for inv in self.invocations if not inv.succeeded]

    @property
    def changed_files(self) -> list[str]:
        """Paths touched by the turn, from the tools' declared side effects."""
        changed: set[str] = set()
        for inv in self.invocations:
            outcome = inv.outcome or {}
            side_effects = outcome.get("side_effects", [])
            if SideEffect.FILES_MODIFIED in side_effects:
                changed.update(outcome.get("modified_files", []))
            if SideEffect.FILES_DELETED in side_effects:
                changed.update(outcome.get("deleted_files", []))
            if SideEffect.FILES_RENAMED in side_effects:
                for old, new in outcome.get("renamed_files", []):
                    changed.update((old, new))
        return sorted(changed)


def unpack_tool_call(call: Any) -> tuple[str, Any]:
    """
    Get (tool_name, args) from an incoming tool call.

    Accepts the ingestion shape {"toolName": ..., "args": {...}} as well as
    OpenAI-style {"function": {"name": ..., "arguments": "<json>"}}. String
    args are decoded as JSON; anything malformed is passed through so the
    dispatcher reports it as a validation error.
    """
    if not isinstance(call, dict):
        return "", call

    if "function" in call and isinstance(call["function"], dict):
        tool_name = call["function"].get("name", "")
        args = call["function"].get("arguments", {})
    else:
        tool_name = call.get("toolName", "")
        args = call.get("args", {})

    if isinstance(args, str):
        try:
            args = json.loads(args) if args.strip() else {}
        except json.JSONDecodeError:
            pass

    return str(tool_name or ""), args


class SessionRunner(QObject):
    """
    Turn execution engine for one session.

    Signals are used for communication with an optional UI.
    If no UI is attached, signals simply aren't connected.
    """

    invocation_updated = Signal(object)  # Invocation, after each state transition
    turn_finished = Signal(dict)  # snapshot
    state_changed = Signal(str)  # SessionState value
    error_occurred = Signal(str)

    def __init__(
        self,
        session_id: str,
        tool_manager: "ToolManager",
        preview: "PreviewBridge | None" = None,
    ) -> None:
        super().__init__()
        self.session_id = session_id
        self.tool_manager = tool_manager
        self.preview = preview

        self._state = SessionState.IDLE
        self._cancel_requested = False

    @property
    def vfs(self) -> Any:
        return self.tool_manager.vfs

    @property
    def state(self) -> str:
        """Current session state."""
        return self._state

    @state.setter
    def state(self, value: str) -> None:
        """Set state and emit signal."""
        if self._state != value:
            self._state = value
            self.state_changed.emit(value)

    @property
    def is_running(self) -> bool:
        return self._state == SessionState.RUNNING

    def cancel(self) -> None:
        """
        Cancel the current turn.

        Calls not yet started are discarded; whatever completed stays applied.
        """
        if self._state != SessionState.RUNNING:
            return
        self._cancel_requested = True

    def run_turn(self, tool_calls: list[Any]) -> TurnResult:
        """Execute a turn's tool calls in order and publish the result."""
        if self._state == SessionState.RUNNING:
            raise RuntimeError(f"Session {self.session_id} is already running a turn")

        result = TurnResult()
        self._cancel_requested = False
        self.state = SessionState.RUNNING

        self.vfs.claim_thread()
        try:
            for index, call in enumerate(tool_calls):
                if self._cancel_requested:
                    result.cancelled = True
                    result.discarded = len(tool_calls) - index
                    break

                tool_name, args = unpack_tool_call(call)
                invocation = self.tool_manager.execute_tool(
                    tool_name, args, observer=self.invocation_updated.emit
                )
                result.invocations.append(invocation)

            # A cancel during the last call discards nothing: the turn completed
            if not result.cancelled:
                result.snapshot = self.vfs.snapshot()
        finally:
            self.vfs.release_thread()
            self._cancel_requested = False
            self.state = SessionState.IDLE

        if result.cancelled:
            self.error_occurred.emit(
                f"Turn cancelled ({result.discarded} queued call(s) discarded)"
            )
            return result

        assert result.snapshot is not None
        if self.preview is not None:
            self.preview.publish(self.session_id, result.snapshot)
        self.turn_finished.emit(result.snapshot)
        return result

    def get_session_metadata(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "state": self._state,
            "files": len(self.vfs),
            "invocations": len(self.tool_manager.invocations),
        }
