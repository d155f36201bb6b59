"""
Tool manager - validates incoming tool calls, routes them to their handler
and records each one as an Invocation.
"""

import itertools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from uigen.errors import InternalToolError, ToolError
from uigen.tools.builtin import file_manager, str_replace_editor
from uigen.tools.commands import COMMAND_TYPES, Command, parse_command
from uigen.tools.context import ToolContext
from uigen.tools.invocation import Invocation

if TYPE_CHECKING:
    from uigen.config.settings import Settings
    from uigen.vfs.memory import InMemoryVFS


BUILTIN_TOOL_MODULES = (str_replace_editor, file_manager)

# Command type -> handler, across all built-in tools
_HANDLERS: dict[type, Callable[[ToolContext, Any], dict[str, Any]]] = {}
for _module in BUILTIN_TOOL_MODULES:
    _HANDLERS.update(_module.HANDLERS)

_unhandled = set(COMMAND_TYPES) - set(_HANDLERS)
assert not _unhandled, f"Commands without a handler: {sorted(t.__name__ for t in _unhandled)}"

InvocationObserver = Callable[[Invocation], None]


class ToolManager:
    """
    Dispatches tool calls against one session's VFS.

    Every call produces a terminal Invocation, whatever happens inside the
    handler: failures become an "error" invocation the agent can read and
    recover from, never an exception out of execute_tool().
    """

    def __init__(
        self,
        vfs: "InMemoryVFS",
        settings: "Settings | None" = None,
        session_id: str = "",
    ) -> None:
        self.vfs = vfs
        self.settings = settings
        self.session_id = session_id

        # Invocation ids are strictly increasing within the session
        self._ids = itertools.count(1)

        # Every invocation executed in this session, in issuance order
        self.invocations: list[Invocation] = []

    def discover_tools(self) -> list[dict[str, Any]]:
        """Schemas of all built-in tools, for the LLM request"""
        return [module.get_schema() for module in BUILTIN_TOOL_MODULES]

    def create_invocation(self, tool_name: str, args: Any) -> Invocation:
        """Record a received tool call as a pending invocation."""
        invocation = Invocation(id=next(self._ids), tool_name=tool_name, args=args)
        self.invocations.append(invocation)
        return invocation

    def _run_handler(self, command: Command) -> dict[str, Any]:
        handler = _HANDLERS[type(command)]
        ctx = ToolContext.from_settings(self.vfs, self.settings, self.session_id)
        return handler(ctx, command)

    def run_invocation(
        self, invocation: Invocation, observer: InvocationObserver | None = None
    ) -> Invocation:
        """
        Drive a pending invocation to its terminal state.

        The observer, if given, is called after each state transition.
        """
        command: Command | None = None
        try:
            command = parse_command(invocation.tool_name, invocation.args)
        except ToolError as err:
            invocation.start()
            _notify(observer, invocation)
            invocation.fail(err)
            _notify(observer, invocation)
            return invocation

        invocation.start(command)
        _notify(observer, invocation)

        try:
            outcome = self._run_handler(command)
        except ToolError as err:
            invocation.fail(err)
        except Exception as exc:
            invocation.fail(InternalToolError.from_exception(exc))
        else:
            invocation.succeed(outcome)

        _notify(observer, invocation)
        return invocation

    def execute_tool(
        self, tool_name: str, args: Any, observer: InvocationObserver | None = None
    ) -> Invocation:
        """Execute one tool call and return its terminal invocation."""
        invocation = self.create_invocation(tool_name, args)
        _notify(observer, invocation)
        return self.run_invocation(invocation, observer)

    def get_invocation(self, invocation_id: int) -> Invocation | None:
        for invocation in self.invocations:
            if invocation.id == invocation_id:
                return invocation
        return None


def _notify(observer: InvocationObserver | None, invocation: Invocation) -> None:
    """Call the observer; its failures never interrupt the invocation."""
    if observer is None:
        return
    try:
        observer(invocation)
    except Exception as exc:
        print(
            f"❌ Invocation observer failed on #{invocation.id} "
            f"({invocation.state.value}): {type(exc).__name__}: {exc}"
        )
