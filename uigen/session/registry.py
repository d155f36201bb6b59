"""
SessionRegistry - maps opaque session ids to their runner and VFS.

Session identity comes from the auth layer; the registry never issues,
verifies or expires it, it only uses it as a lookup key. Each session owns
its own VFS exclusively and nothing is shared between sessions. A session's
project tree is destroyed on close unless it is explicitly exported.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, Signal

from uigen.constants import (
    DEFAULT_AUTHOR_EMAIL,
    DEFAULT_AUTHOR_NAME,
    DEFAULT_EXPORT_BRANCH,
    DEFAULT_HISTORY_LIMIT,
)
from uigen.session.runner import SessionRunner
from uigen.tools.manager import ToolManager
from uigen.vfs.memory import InMemoryVFS

if TYPE_CHECKING:
    from uigen.config.settings import Settings
    from uigen.git_backend.repository import ProjectRepository
    from uigen.preview.bridge import PreviewBridge


class SessionRegistry(QObject):
    """
    Registry of live sessions.

    Create one per application and pass it where it is needed; there is no
    global instance.
    """

    # Signals for UI updates
    session_registered = Signal(str)  # session_id
    session_unregistered = Signal(str)  # session_id

    def __init__(
        self,
        settings: "Settings | None" = None,
        preview: "PreviewBridge | None" = None,
    ) -> None:
        super().__init__()
        self.settings = settings
        self.preview = preview
        self._sessions: dict[str, SessionRunner] = {}

    def _history_limit(self) -> int | None:
        if self.settings is None:
            return DEFAULT_HISTORY_LIMIT
        return self.settings.get_history_limit()

    def open(self, session_id: str, seed: Mapping[str, str] | None = None) -> SessionRunner:
        """
        Get the runner for a session, creating it (and its VFS) on first use.

        A seed snapshot only applies to a new session.
        """
        if not isinstance(session_id, str) or not session_id:
            raise ValueError("session_id must be a non-empty string")

        runner = self._sessions.get(session_id)
        if runner is not None:
            if seed is not None:
                raise ValueError(f"Session {session_id} already exists; cannot seed it")
            return runner

        if seed is not None:
            vfs = InMemoryVFS.from_snapshot(seed, self._history_limit())
        else:
            vfs = InMemoryVFS(self._history_limit())

        tool_manager = ToolManager(vfs, self.settings, session_id)
        runner = SessionRunner(session_id, tool_manager, self.preview)
        self._sessions[session_id] = runner
        self.session_registered.emit(session_id)
        return runner

    def get(self, session_id: str) -> SessionRunner | None:
        return self._sessions.get(session_id)

    def session_ids(self) -> list[str]:
        return sorted(self._sessions)

    def close(
        self,
        session_id: str,
        export_to: "ProjectRepository | None" = None,
        branch_name: str = DEFAULT_EXPORT_BRANCH,
    ) -> str | None:
        """
        End a session and destroy its VFS.

        If export_to is given, the final snapshot is committed there first.

        Returns:
            The export commit OID, or None if nothing was exported
        """
        runner = self._sessions.get(session_id)
        if runner is None:
            raise KeyError(f"Unknown session: {session_id}")

        runner.cancel()

        commit_oid: str | None = None
        if export_to is not None:
            author_name = DEFAULT_AUTHOR_NAME
            author_email = DEFAULT_AUTHOR_EMAIL
            if self.settings is not None:
                author_name = self.settings.get("export.author_name", author_name)
                author_email = self.settings.get("export.author_email", author_email)
            commit_oid = export_to.commit_snapshot(
                branch_name,
                runner.vfs.snapshot(),
                f"Export session {session_id}",
                author_name=author_name,
                author_email=author_email,
            )
            print(f"💾 Exported session {session_id} to {branch_name} ({commit_oid[:8]})")

        del self._sessions[session_id]
        if self.preview is not None:
            self.preview.forget(session_id)
        self.session_unregistered.emit(session_id)
        return commit_oid
