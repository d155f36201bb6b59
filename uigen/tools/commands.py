"""
Command variants issued by the agent, validated once at ingestion.

An incoming tool call is {toolName, args}, where args carries a "command"
discriminator. parse_command() turns it into one of the frozen dataclasses
below or raises ValidationError; nothing past this point looks at raw args.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Union

from uigen.constants import EDITOR_COMMANDS, EDITOR_TOOL, FILE_MANAGER_COMMANDS, FILE_MANAGER_TOOL
from uigen.errors import ValidationError
from uigen.vfs.base import normalize_path


@dataclass(frozen=True)
class Create:
    TOOL: ClassVar[str] = EDITOR_TOOL
    COMMAND: ClassVar[str] = "create"

    path: str
    content: str


@dataclass(frozen=True)
class View:
    TOOL: ClassVar[str] = EDITOR_TOOL
    COMMAND: ClassVar[str] = "view"

    path: str
    # 1-indexed inclusive (start, end); end == -1 means end of file
    view_range: tuple[int, int] | None = None


@dataclass(frozen=True)
class Replace:
    TOOL: ClassVar[str] = EDITOR_TOOL
    COMMAND: ClassVar[str] = "str_replace"

    path: str
    match: str
    replacement: str


@dataclass(frozen=True)
class Insert:
    TOOL: ClassVar[str] = EDITOR_TOOL
    COMMAND: ClassVar[str] = "insert"

    path: str
    after_line: int
    text: str


@dataclass(frozen=True)
class UndoEdit:
    TOOL: ClassVar[str] = EDITOR_TOOL
    COMMAND: ClassVar[str] = "undo_edit"

    path: str


@dataclass(frozen=True)
class Rename:
    TOOL: ClassVar[str] = FILE_MANAGER_TOOL
    COMMAND: ClassVar[str] = "rename"

    path: str
    new_path: str


@dataclass(frozen=True)
class Delete:
    TOOL: ClassVar[str] = FILE_MANAGER_TOOL
    COMMAND: ClassVar[str] = "delete"

    path: str


Command = Union[Create, View, Replace, Insert, UndoEdit, Rename, Delete]

COMMAND_TYPES: tuple[type, ...] = (Create, View, Replace, Insert, UndoEdit, Rename, Delete)


def _require_str(args: dict[str, Any], key: str, allow_empty: bool = True) -> str:
    value = args.get(key)
    if not isinstance(value, str):
        raise ValidationError(f"'{key}' is required and must be a string")
    if not allow_empty and not value:
        raise ValidationError(f"'{key}' must not be empty")
    return value


def _require_int(args: dict[str, Any], key: str) -> int:
    value = args.get(key)
    # bool is an int subclass; "true" is not a line number
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"'{key}' is required and must be an integer")
    return value


def _require_path(args: dict[str, Any], key: str) -> str:
    value = args.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{key}' is required and must be a non-empty path")
    return normalize_path(value)


def _parse_view_range(value: Any) -> tuple[int, int] | None:
    if value is None:
        return None
    if (
        not isinstance(value, (list, tuple))
        or len(value) != 2
        or not all(isinstance(v, int) and not isinstance(v, bool) for v in value)
    ):
        raise ValidationError("'view_range' must be a list of two integers [start, end]")
    return (value[0], value[1])


def parse_command(tool_name: str, args: Any) -> Command:
    """
    Validate a raw tool call and build its Command.

    Raises:
        ValidationError: unknown tool or command, missing or mistyped fields
    """
    if not isinstance(args, dict):
        raise ValidationError("args must be an object")

    command = args.get("command")
    if tool_name == EDITOR_TOOL:
        allowed = EDITOR_COMMANDS
    elif tool_name == FILE_MANAGER_TOOL:
        allowed = FILE_MANAGER_COMMANDS
    else:
        raise ValidationError(f"Unknown tool: {tool_name}")

    if command not in allowed:
        raise ValidationError(
            f"Unknown command {command!r} for {tool_name} (expected one of: {', '.join(allowed)})"
        )

    path = _require_path(args, "path")

    if command == "create":
        return Create(path, _require_str(args, "file_text"))
    if command == "view":
        return View(path, _parse_view_range(args.get("view_range")))
    if command == "str_replace":
        new_str = args.get("new_str", "")
        if not isinstance(new_str, str):
            raise ValidationError("'new_str' must be a string")
        return Replace(path, _require_str(args, "old_str", allow_empty=False), new_str)
    if command == "insert":
        return Insert(
            path,
            _require_int(args, "insert_line"),
            _require_str(args, "new_str", allow_empty=False),
        )
    if command == "undo_edit":
        return UndoEdit(path)
    if command == "rename":
        return Rename(path, _require_path(args, "new_path"))
    return Delete(path)
