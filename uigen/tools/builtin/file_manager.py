"""
Structural tool: rename and delete files (or whole directories)
"""

from collections.abc import Callable
from typing import Any

from uigen.constants import FILE_MANAGER_TOOL
from uigen.tools.commands import Delete, Rename
from uigen.tools.context import ToolContext
from uigen.tools.side_effects import SideEffect


def get_schema() -> dict[str, Any]:
    """Return tool schema for LLM"""
    return {
        "type": "function",
        "function": {
            "name": FILE_MANAGER_TOOL,
            "description": "Rename/move or delete a file or directory. Rename fails if the destination already exists. Deletion cannot be undone.",
            "parameters": {
                "type": "object",
                "properties": {
                    "command": {"type": "string", "enum": ["rename", "delete"]},
                    "path": {
                        "type": "string",
                        "description": "Current path of the file or directory",
                    },
                    "new_path": {
                        "type": "string",
                        "description": "New path (rename only)",
                    },
                },
                "required": ["command", "path"],
            },
        },
    }


def rename(ctx: ToolContext, command: Rename) -> dict[str, Any]:
    """Re-key a file under new_path, keeping its content and undo history."""
    moves = ctx.vfs.move_to(command.path, command.new_path)

    return {
        "success": True,
        "message": f"Renamed {command.path} -> {command.new_path}",
        "renamed_files": [[old, new] for old, new in moves],
        "side_effects": [SideEffect.FILES_RENAMED],
    }


def delete(ctx: ToolContext, command: Delete) -> dict[str, Any]:
    """Remove a file (history included)."""
    removed = ctx.vfs.remove(command.path)

    return {
        "success": True,
        "message": f"Deleted {command.path}",
        "deleted_files": removed,
        "side_effects": [SideEffect.FILES_DELETED],
    }


HANDLERS: dict[type, Callable[[ToolContext, Any], dict[str, Any]]] = {
    Rename: rename,
    Delete: delete,
}
