"""
Error taxonomy for tool execution.

Every error here is recoverable: the dispatcher encodes it into the
invocation's terminal state so the agent can read it and retry. None of them
leave the file tree modified.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Kind of a tool failure, as reported to the agent.

    Inherits from str so it's JSON-serializable automatically.
    """

    VALIDATION = "validation"  # Malformed command shape
    NOT_FOUND = "not_found"  # Missing path or missing match
    AMBIGUOUS_MATCH = "ambiguous_match"  # Replace target occurs more than once
    EMPTY_HISTORY = "empty_history"  # Undo with no prior edit
    CONFLICT = "conflict"  # Target path already exists
    INTERNAL = "internal"  # Unexpected handler exception


class ToolError(Exception):
    """Base class for failures a tool reports back to the agent."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def to_dict(self) -> dict[str, Any]:
        """Structured error payload for the invocation outcome."""
        result: dict[str, Any] = {
            "success": False,
            "error": self.kind.value,
            "message": self.message,
        }
        if self.path is not None:
            result["path"] = self.path
        return result


class ValidationError(ToolError):
    kind = ErrorKind.VALIDATION


class NotFoundError(ToolError):
    kind = ErrorKind.NOT_FOUND


class AmbiguousMatchError(ToolError):
    kind = ErrorKind.AMBIGUOUS_MATCH

    def __init__(self, message: str, path: str | None = None, count: int = 0) -> None:
        super().__init__(message, path)
        self.count = count

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["count"] = self.count
        return result


class EmptyHistoryError(ToolError):
    kind = ErrorKind.EMPTY_HISTORY


class ConflictError(ToolError):
    kind = ErrorKind.CONFLICT


class InternalToolError(ToolError):
    """Wraps an unexpected exception raised inside a handler."""

    kind = ErrorKind.INTERNAL

    @classmethod
    def from_exception(cls, exc: BaseException) -> "InternalToolError":
        return cls(f"{type(exc).__name__}: {exc}")
