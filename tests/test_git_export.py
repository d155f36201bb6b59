"""
Tests for exporting snapshots to git and seeding from a branch.
"""

import pygit2
import pytest

from uigen.errors import NotFoundError
from uigen.git_backend.repository import ProjectRepository
from uigen.vfs.git_commit import GitCommitVFS

SNAPSHOT = {
    "/App.jsx": "import Card from '@/components/Card';\n",
    "/components/Card.jsx": "export default function Card() {}\n",
    "/components/ui/Button.jsx": "export default function Button() {}\n",
}


@pytest.fixture
def project_repo(tmp_path):
    return ProjectRepository(tmp_path / "export")


class TestProjectRepository:
    def test_init_creates_repository(self, tmp_path):
        ProjectRepository(tmp_path / "new")
        assert (tmp_path / "new" / ".git").is_dir()

    def test_open_without_create_requires_repository(self, tmp_path):
        with pytest.raises(ValueError):
            ProjectRepository(tmp_path / "missing", create=False)

    def test_commit_and_load_roundtrip(self, project_repo):
        project_repo.commit_snapshot("uigen/project", SNAPSHOT, "Export session s1")

        assert project_repo.has_branch("uigen/project")
        assert project_repo.load_snapshot("uigen/project") == SNAPSHOT

    def test_commit_metadata(self, project_repo):
        oid = project_repo.commit_snapshot(
            "main", SNAPSHOT, "Export session s1", author_name="Dev", author_email="dev@x.io"
        )

        commit = project_repo.repo[oid]
        assert commit.message == "Export session s1"
        assert commit.author.name == "Dev"
        assert commit.author.email == "dev@x.io"
        assert commit.parents == []

    def test_second_export_chains_and_drops_deleted_files(self, project_repo):
        first = project_repo.commit_snapshot("main", SNAPSHOT, "first")
        second = project_repo.commit_snapshot("main", {"/App.jsx": "v2"}, "second")

        commit = project_repo.repo[second]
        assert [str(parent.id) for parent in commit.parents] == [first]
        assert project_repo.load_snapshot("main") == {"/App.jsx": "v2"}

    def test_load_missing_branch(self, project_repo):
        with pytest.raises(ValueError):
            project_repo.load_snapshot("nope")

    def test_reopen_existing_repository(self, tmp_path, project_repo):
        project_repo.commit_snapshot("main", SNAPSHOT, "first")
        reopened = ProjectRepository(tmp_path / "export", create=False)
        assert reopened.load_snapshot("main") == SNAPSHOT


class TestGitCommitVFS:
    @pytest.fixture
    def commit_vfs(self, project_repo):
        oid = project_repo.commit_snapshot("main", SNAPSHOT, "first")
        return GitCommitVFS(project_repo.repo, project_repo.repo[oid])

    def test_list_files(self, commit_vfs):
        assert commit_vfs.list_files() == sorted(SNAPSHOT)

    def test_read_file(self, commit_vfs):
        assert commit_vfs.read_file("components/Card.jsx") == SNAPSHOT["/components/Card.jsx"]

    def test_file_exists(self, commit_vfs):
        assert commit_vfs.file_exists("/App.jsx")
        assert not commit_vfs.file_exists("/components")
        assert not commit_vfs.file_exists("/nope.jsx")

    def test_read_missing(self, commit_vfs):
        with pytest.raises(NotFoundError):
            commit_vfs.read_file("/nope.jsx")

    def test_read_directory(self, commit_vfs):
        with pytest.raises(NotFoundError):
            commit_vfs.read_file("/components")

    def test_read_only(self, commit_vfs):
        with pytest.raises(NotImplementedError):
            commit_vfs.write_file("/App.jsx", "x")
        with pytest.raises(NotImplementedError):
            commit_vfs.delete_file("/App.jsx")

    def test_commit_is_a_pygit2_commit(self, commit_vfs):
        assert isinstance(commit_vfs.commit, pygit2.Commit)
