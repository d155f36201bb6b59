"""
Content-editing tool: create, view, str_replace, insert and undo_edit.

Handlers take a ToolContext and a validated command. They return a result
dict on success and raise a ToolError on failure; a failing handler never
touches the VFS.
"""

from collections.abc import Callable
from typing import Any

from uigen.constants import EDITOR_TOOL
from uigen.errors import AmbiguousMatchError, ConflictError, NotFoundError
from uigen.tools.commands import Create, Insert, Replace, UndoEdit, View
from uigen.tools.context import ToolContext
from uigen.tools.side_effects import SideEffect


def get_schema() -> dict[str, Any]:
    """Return tool schema for LLM"""
    return {
        "type": "function",
        "function": {
            "name": EDITOR_TOOL,
            "description": """View, create and edit files in the project's virtual file system.

Paths are absolute, rooted at '/'. Every project needs a root /App.jsx.

Commands:
- create: write file_text to path (overwrites an existing file)
- view: show a file, or list a directory. view_range [start, end] is 1-indexed and inclusive, end -1 reads to the end
- str_replace: replace old_str with new_str. old_str must match EXACTLY ONE location, including whitespace
- insert: insert new_str after line insert_line (0 inserts at the top)
- undo_edit: revert the last edit made to path""",
            "parameters": {
                "type": "object",
                "properties": {
                    "command": {
                        "type": "string",
                        "enum": ["view", "create", "str_replace", "insert", "undo_edit"],
                    },
                    "path": {"type": "string", "description": "Absolute path, e.g. /App.jsx"},
                    "file_text": {"type": "string", "description": "Content for create"},
                    "old_str": {"type": "string", "description": "Exact text to replace"},
                    "new_str": {
                        "type": "string",
                        "description": "Replacement text (str_replace) or text to insert (insert)",
                    },
                    "insert_line": {
                        "type": "integer",
                        "description": "Line after which to insert (0 = top of file)",
                    },
                    "view_range": {
                        "type": "array",
                        "items": {"type": "integer"},
                        "description": "Optional [start, end] line range for view",
                    },
                },
                "required": ["command", "path"],
            },
        },
    }


def create(ctx: ToolContext, command: Create) -> dict[str, Any]:
    """Write a file, keeping the previous content in history if it existed."""
    if ctx.strict_create and ctx.vfs.file_exists(command.path):
        raise ConflictError(f"File already exists: {command.path}", path=command.path)

    is_new = ctx.vfs.put(command.path, command.content)

    side_effects = [SideEffect.FILES_MODIFIED]
    result: dict[str, Any] = {
        "success": True,
        "message": f"{'Created' if is_new else 'Overwrote'} {command.path}",
        "modified_files": [command.path],
        "side_effects": side_effects,
    }
    if is_new:
        result["new_files"] = [command.path]
        side_effects.append(SideEffect.NEW_FILES_CREATED)
    return result


def split_lines(content: str) -> list[str]:
    """Split into lines on LF only, keeping line endings."""
    parts = content.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _slice_lines(content: str, view_range: tuple[int, int]) -> tuple[str, int, int]:
    """Clamp a 1-indexed inclusive range to the file and slice it."""
    lines = split_lines(content)
    total = len(lines)

    start, end = view_range
    start = max(1, start)
    if end < 0 or end > total:
        end = total

    if start > end:
        return "", start, end
    return "".join(lines[start - 1 : end]), start, end


def view(ctx: ToolContext, command: View) -> dict[str, Any]:
    """Show a file (optionally a line range) or list a directory."""
    vfs = ctx.vfs

    if not vfs.file_exists(command.path):
        if vfs.is_directory(command.path):
            entries = vfs.list_dir(command.path)
            return {
                "success": True,
                "path": command.path,
                "entries": entries,
                "content": "\n".join(entries),
            }
        raise NotFoundError(f"File not found: {command.path}", path=command.path)

    content = vfs.get(command.path)
    total_lines = len(split_lines(content))

    if command.view_range is None:
        return {
            "success": True,
            "path": command.path,
            "content": content,
            "total_lines": total_lines,
        }

    excerpt, start, end = _slice_lines(content, command.view_range)
    return {
        "success": True,
        "path": command.path,
        "content": excerpt,
        "range": f"{start}-{end}",
        "total_lines": total_lines,
    }


def str_replace(ctx: ToolContext, command: Replace) -> dict[str, Any]:
    """Replace the single exact occurrence of command.match."""
    content = ctx.vfs.get(command.path)

    # str.count counts non-overlapping occurrences
    count = content.count(command.match)
    if count == 0:
        raise NotFoundError(
            f"old_str not found in {command.path}. It must match the file exactly, "
            "including whitespace and indentation. View the file to see its current content.",
            path=command.path,
        )
    if count > 1:
        raise AmbiguousMatchError(
            f"old_str occurs {count} times in {command.path}. "
            "Include more surrounding context so it matches exactly one location.",
            path=command.path,
            count=count,
        )

    ctx.vfs.put(command.path, content.replace(command.match, command.replacement, 1))

    return {
        "success": True,
        "message": f"Replaced in {command.path}",
        "modified_files": [command.path],
        "side_effects": [SideEffect.FILES_MODIFIED],
    }


def insert_text(content: str, after_line: int, text: str) -> str:
    """
    Insert text after a 0-indexed line count.

    0 prepends, anything past the last line appends. The inserted block always
    ends with a newline; appending to a file without a trailing newline adds
    one first.
    """
    lines = split_lines(content)
    index = min(max(after_line, 0), len(lines))

    block = text if text.endswith("\n") else text + "\n"
    if index == len(lines) and lines and not lines[-1].endswith("\n"):
        lines[-1] += "\n"

    lines.insert(index, block)
    return "".join(lines)


def insert(ctx: ToolContext, command: Insert) -> dict[str, Any]:
    """Insert text after a line. Out-of-range lines are clamped."""
    content = ctx.vfs.get(command.path)
    ctx.vfs.put(command.path, insert_text(content, command.after_line, command.text))

    return {
        "success": True,
        "message": f"Inserted text in {command.path}",
        "modified_files": [command.path],
        "side_effects": [SideEffect.FILES_MODIFIED],
    }


def undo_edit(ctx: ToolContext, command: UndoEdit) -> dict[str, Any]:
    """Restore the content a file had before its last edit."""
    ctx.vfs.pop_history(command.path)

    return {
        "success": True,
        "message": f"Reverted last edit to {command.path}",
        "history_remaining": len(ctx.vfs.history(command.path)),
        "modified_files": [command.path],
        "side_effects": [SideEffect.FILES_MODIFIED],
    }


HANDLERS: dict[type, Callable[[ToolContext, Any], dict[str, Any]]] = {
    Create: create,
    View: view,
    Replace: str_replace,
    Insert: insert,
    UndoEdit: undo_edit,
}
