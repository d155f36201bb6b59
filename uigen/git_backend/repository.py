"""
Git repository management using pygit2

Sessions are ephemeral; this is the explicit export path. A snapshot is
committed as a complete tree on a branch, and a branch head can be read back
as a snapshot to seed a new session.
"""

from collections.abc import Mapping
from pathlib import Path

import pygit2

from uigen.constants import DEFAULT_AUTHOR_EMAIL, DEFAULT_AUTHOR_NAME
from uigen.vfs.git_commit import GitCommitVFS


class ProjectRepository:
    """Manages git repository operations for project export"""

    def __init__(self, repo_path: str | Path, create: bool = True) -> None:
        """Open a repository, initializing it if needed (and allowed)"""
        repo_path = Path(repo_path)
        discovered = pygit2.discover_repository(str(repo_path)) if repo_path.exists() else None

        if discovered:
            self.repo = pygit2.Repository(discovered)
        elif create:
            repo_path.mkdir(parents=True, exist_ok=True)
            self.repo = pygit2.init_repository(str(repo_path))
        else:
            raise ValueError(f"Not a git repository: {repo_path}")

    def has_branch(self, branch_name: str) -> bool:
        return branch_name in self.repo.branches.local

    def get_branch_head(self, branch_name: str) -> pygit2.Commit:
        """Get the head commit of a branch"""
        branch = self.repo.branches.local[branch_name]
        return branch.peel(pygit2.Commit)

    def create_tree_from_snapshot(self, snapshot: Mapping[str, str]) -> pygit2.Oid:
        """
        Create a tree holding exactly the files of a snapshot.

        Builds a nested structure first so files sharing a directory end up
        in one subtree.
        """
        nested: dict = {}
        for filepath, content in snapshot.items():
            blob_oid = self.repo.create_blob(content.encode("utf-8"))
            parts = filepath.strip("/").split("/")
            current = nested
            for part in parts[:-1]:
                if part not in current or not isinstance(current[part], dict):
                    current[part] = {}
                current = current[part]
            current[parts[-1]] = blob_oid

        return self._build_tree_recursive(nested)

    def _build_tree_recursive(self, entries: dict) -> pygit2.Oid:
        tree_builder = self.repo.TreeBuilder()

        for name, value in entries.items():
            if isinstance(value, dict):
                subtree_oid = self._build_tree_recursive(value)
                tree_builder.insert(name, subtree_oid, pygit2.GIT_FILEMODE_TREE)
            else:
                tree_builder.insert(name, value, pygit2.GIT_FILEMODE_BLOB)

        return tree_builder.write()

    def commit_snapshot(
        self,
        branch_name: str,
        snapshot: Mapping[str, str],
        message: str,
        author_name: str = DEFAULT_AUTHOR_NAME,
        author_email: str = DEFAULT_AUTHOR_EMAIL,
    ) -> str:
        """
        Commit a snapshot as the new head of a branch.

        The branch is created on first export. Files missing from the snapshot
        are absent from the commit.

        Returns:
            Commit OID as string
        """
        tree_oid = self.create_tree_from_snapshot(snapshot)

        parents: list[pygit2.Oid] = []
        if self.has_branch(branch_name):
            parents.append(self.get_branch_head(branch_name).id)

        signature = pygit2.Signature(author_name, author_email)
        commit_oid = self.repo.create_commit(
            f"refs/heads/{branch_name}",  # Update (or create) branch ref
            signature,  # author
            signature,  # committer
            message,
            tree_oid,
            parents,
        )
        return str(commit_oid)

    def load_snapshot(self, branch_name: str) -> dict[str, str]:
        """Read a branch head back as a {"/path": content} snapshot"""
        if not self.has_branch(branch_name):
            raise ValueError(f"No such branch: {branch_name}")
        return GitCommitVFS(self.repo, self.get_branch_head(branch_name)).snapshot()
