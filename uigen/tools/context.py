"""
ToolContext - what a tool handler receives besides its command.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uigen.config.settings import Settings
    from uigen.vfs.memory import InMemoryVFS


@dataclass
class ToolContext:
    """
    Context for tool execution.

    - vfs: the session's project tree (the only thing handlers mutate)
    - session_id: opaque session identity, for messages only
    - strict_create: fail create on an existing path instead of overwriting
    """

    vfs: "InMemoryVFS"
    session_id: str = ""
    strict_create: bool = False

    @classmethod
    def from_settings(
        cls, vfs: "InMemoryVFS", settings: "Settings | None", session_id: str = ""
    ) -> "ToolContext":
        strict = bool(settings.get("vfs.strict_create", False)) if settings else False
        return cls(vfs=vfs, session_id=session_id, strict_create=strict)
