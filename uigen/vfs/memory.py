"""
In-memory VFS holding a session's project tree and per-file edit history
"""

import posixpath
from collections import deque
from collections.abc import Container, Mapping
from dataclasses import dataclass, field

from uigen.constants import DEFAULT_HISTORY_LIMIT
from uigen.errors import ConflictError, EmptyHistoryError, NotFoundError, ValidationError
from uigen.vfs.base import VFS, normalize_path


@dataclass
class VirtualFile:
    """A file in the project tree.

    history holds prior contents, most recent last. Only the owning VFS
    touches it, through push_history() and pop_history().
    """

    path: str
    content: str
    history: deque[str] = field(default_factory=deque)


class InMemoryVFS(VFS):
    """
    Project tree for one session, kept entirely in memory.

    Directories are not stored: a directory is the common prefix of file
    paths. Files are keyed by normalized absolute path.

    Thread safety: This VFS uses thread ownership assertions. Call claim_thread()
    before accessing from a background thread, and release_thread() when done.
    """

    def __init__(self, history_limit: int | None = DEFAULT_HISTORY_LIMIT) -> None:
        super().__init__()  # Initialize thread ownership
        if history_limit is not None and history_limit < 1:
            raise ValueError("history_limit must be at least 1 (or None for unbounded)")
        self.history_limit = history_limit

        # path -> VirtualFile
        self._files: dict[str, VirtualFile] = {}

    @classmethod
    def from_snapshot(
        cls, snapshot: Mapping[str, str], history_limit: int | None = DEFAULT_HISTORY_LIMIT
    ) -> "InMemoryVFS":
        """Create a VFS seeded with a {path: content} mapping (no history)."""
        vfs = cls(history_limit)
        for path, content in snapshot.items():
            vfs.put(path, content)
        return vfs

    def _new_history(self) -> deque[str]:
        return deque(maxlen=self.history_limit)

    def _require(self, path: str) -> VirtualFile:
        vfile = self._files.get(path)
        if vfile is None:
            raise NotFoundError(f"File not found: {path}", path=path)
        return vfile

    def _children(self, path: str) -> list[str]:
        """All file paths below a directory prefix, sorted."""
        prefix = path.rstrip("/") + "/"
        return sorted(p for p in self._files if p.startswith(prefix))

    def _file_ancestor(self, path: str, ignore: Container[str] = ()) -> str | None:
        """Nearest ancestor directory of path that is actually a file."""
        parent = posixpath.dirname(path)
        while parent != "/":
            if parent in self._files and parent not in ignore:
                return parent
            parent = posixpath.dirname(parent)
        return None

    # Core contract

    def get(self, path: str) -> str:
        """Return the current content of a file."""
        self._assert_owner()
        return self._require(normalize_path(path)).content

    def put(self, path: str, content: str) -> bool:
        """
        Create or overwrite a file.

        Overwriting pushes the prior content onto the file's history.

        Returns:
            True if the file was created, False if it was overwritten
        """
        self._assert_owner()
        path = normalize_path(path)

        vfile = self._files.get(path)
        if vfile is not None:
            self.push_history(path)
            vfile.content = content
            return False

        if self._children(path):
            raise ConflictError(f"Path is a directory: {path}", path=path)
        ancestor = self._file_ancestor(path)
        if ancestor is not None:
            raise ConflictError(f"Parent path is a file: {ancestor}", path=path)

        self._files[path] = VirtualFile(path, content, self._new_history())
        return True

    def remove(self, path: str) -> list[str]:
        """
        Remove a file, or every file below a directory prefix.

        History is discarded with the file.

        Returns:
            The removed file paths
        """
        self._assert_owner()
        path = normalize_path(path)

        if path in self._files:
            del self._files[path]
            return [path]

        children = self._children(path)
        if not children:
            raise NotFoundError(f"File not found: {path}", path=path)

        for child in children:
            del self._files[child]
        return children

    def move_to(self, old_path: str, new_path: str) -> list[tuple[str, str]]:
        """
        Re-key a file (or every file below a directory prefix) under a new path.

        Content and history move with the file. Nothing moves unless every
        target is free.

        Returns:
            (old, new) pairs for every moved file
        """
        self._assert_owner()
        old_path = normalize_path(old_path)
        new_path = normalize_path(new_path)

        if old_path in self._files:
            moves = [(old_path, new_path)]
        else:
            children = self._children(old_path)
            if not children:
                raise NotFoundError(f"File not found: {old_path}", path=old_path)
            if new_path == old_path or new_path.startswith(old_path + "/"):
                raise ValidationError(
                    f"Cannot move directory {old_path} into itself", path=new_path
                )
            moves = [(child, new_path + child[len(old_path) :]) for child in children]

        if new_path in self._files or self._children(new_path):
            raise ConflictError(f"Destination already exists: {new_path}", path=new_path)
        # A source that moves away no longer blocks its own path
        sources = {source for source, _ in moves}
        for _, target in moves:
            if target in self._files:
                raise ConflictError(f"Destination already exists: {target}", path=target)
            ancestor = self._file_ancestor(target, ignore=sources)
            if ancestor is not None:
                raise ConflictError(f"Parent path is a file: {ancestor}", path=target)

        moved = [self._files.pop(source) for source, _ in moves]
        for vfile, (_, target) in zip(moved, moves):
            vfile.path = target
            self._files[target] = vfile

        return moves

    def push_history(self, path: str) -> None:
        """Push a file's current content onto its history."""
        self._assert_owner()
        vfile = self._require(normalize_path(path))
        vfile.history.append(vfile.content)

    def pop_history(self, path: str) -> str:
        """
        Pop the most recent history entry and make it the current content.

        Returns:
            The restored content
        """
        self._assert_owner()
        path = normalize_path(path)
        vfile = self._require(path)
        if not vfile.history:
            raise EmptyHistoryError(f"No edit history to undo for: {path}", path=path)

        vfile.content = vfile.history.pop()
        return vfile.content

    # Queries

    def history(self, path: str) -> tuple[str, ...]:
        """Read-only copy of a file's history, oldest first."""
        self._assert_owner()
        return tuple(self._require(normalize_path(path)).history)

    def is_directory(self, path: str) -> bool:
        """Check if a path is a directory prefix of at least one file."""
        self._assert_owner()
        path = normalize_path(path)
        return path not in self._files and bool(self._children(path))

    def list_dir(self, path: str = "/") -> list[str]:
        """
        List the immediate entries of a directory.

        Subdirectories are returned with a trailing slash.
        """
        self._assert_owner()
        prefix = "/" if path.strip() in ("", "/") else normalize_path(path) + "/"

        entries: set[str] = set()
        for filepath in self._files:
            if not filepath.startswith(prefix):
                continue
            name, sep, _ = filepath[len(prefix) :].partition("/")
            entries.add(name + "/" if sep else name)

        if not entries and prefix != "/":
            directory = prefix.rstrip("/")
            raise NotFoundError(f"Directory not found: {directory}", path=directory)
        return sorted(entries)

    def snapshot(self) -> dict[str, str]:
        """Full {path: content} copy of the tree."""
        self._assert_owner()
        return {path: self._files[path].content for path in sorted(self._files)}

    # VFS interface

    def read_file(self, path: str) -> str:
        """Read file content"""
        return self.get(path)

    def write_file(self, path: str, content: str) -> None:
        """Write file content (with history)"""
        self.put(path, content)

    def list_files(self) -> list[str]:
        """List all files, sorted"""
        self._assert_owner()
        return sorted(self._files)

    def file_exists(self, path: str) -> bool:
        """Check if a file exists"""
        self._assert_owner()
        return normalize_path(path) in self._files

    def delete_file(self, path: str) -> None:
        """Delete a file"""
        self.remove(path)

    def __len__(self) -> int:
        return len(self._files)
