"""
Read-only VFS backed by a git commit
"""

import pygit2

from uigen.errors import NotFoundError
from uigen.vfs.base import VFS, normalize_path


class GitCommitVFS(VFS):
    """Read-only view of a git commit.

    Paths use the same absolute form as the in-memory VFS ("/App.jsx"),
    git tree paths are relative.
    """

    def __init__(self, repo: pygit2.Repository, commit: pygit2.Commit) -> None:
        super().__init__()
        self.repo = repo
        self.commit = commit
        self.tree = commit.tree

    def read_file(self, path: str) -> str:
        """Read file content from git tree"""
        path = normalize_path(path)
        try:
            entry = self.tree[path.lstrip("/")]
        except KeyError as err:
            raise NotFoundError(f"File not found: {path}", path=path) from err

        blob = self.repo[entry.id]
        if not isinstance(blob, pygit2.Blob):
            raise NotFoundError(f"Not a file: {path}", path=path)
        return blob.data.decode("utf-8", errors="replace")

    def write_file(self, path: str, content: str) -> None:
        """Write operations not supported on read-only VFS"""
        raise NotImplementedError("GitCommitVFS is read-only")

    def list_files(self) -> list[str]:
        """List all files in the commit"""
        files: list[str] = []

        def walk_tree(tree: pygit2.Tree, prefix: str) -> None:
            for entry in tree:
                assert entry.name is not None, "Tree entry name should never be None"
                entry_path = f"{prefix}/{entry.name}"

                # Skip submodules - their OIDs point to commits in other repositories
                if entry.filemode == pygit2.GIT_FILEMODE_COMMIT:
                    continue

                obj = self.repo[entry.id]
                if isinstance(obj, pygit2.Tree):
                    walk_tree(obj, entry_path)
                elif isinstance(obj, pygit2.Blob):
                    files.append(entry_path)

        walk_tree(self.tree, "")
        return sorted(files)

    def file_exists(self, path: str) -> bool:
        """Check if file exists in commit"""
        try:
            entry = self.tree[normalize_path(path).lstrip("/")]
        except KeyError:
            return False
        return isinstance(self.repo[entry.id], pygit2.Blob)

    def delete_file(self, path: str) -> None:
        """Delete operations not supported on read-only VFS"""
        raise NotImplementedError("GitCommitVFS is read-only")

    def snapshot(self) -> dict[str, str]:
        """Full {path: content} mapping of the commit, suitable as a session seed."""
        return {path: self.read_file(path) for path in self.list_files()}
