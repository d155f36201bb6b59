"""
Abstract VFS interface for the project tree
"""

import posixpath
import threading
from abc import ABC, abstractmethod

from uigen.errors import ValidationError

ROOT = "/"


def normalize_path(path: object) -> str:
    """Normalize an agent-supplied path to an absolute POSIX path.

    A missing leading slash is added, and "//", "." and ".." are collapsed
    (".." never climbs above the root). The root itself is not a file path.
    """
    if not isinstance(path, str) or not path.strip():
        raise ValidationError("path must be a non-empty string")

    # Strip every leading slash first: normpath keeps a leading "//" as-is
    normalized = posixpath.normpath(ROOT + path.strip().lstrip("/"))
    if normalized == ROOT:
        raise ValidationError("path must name a file, not the root directory", path=ROOT)
    return normalized


class VFS(ABC):
    """Abstract virtual filesystem interface with thread ownership.

    VFS instances are NOT thread-safe and must only be accessed from one thread
    at a time. Use claim_thread() before accessing from a new thread, and
    release_thread() when done. Mutating operations assert the current thread
    owns the VFS.
    """

    def __init__(self) -> None:
        # Thread that currently owns this VFS (None = unclaimed)
        self._owner_thread_id: int | None = None

    def claim_thread(self) -> None:
        """Claim this VFS for the current thread.

        Asserts that the VFS is not already claimed by another thread.
        """
        current = threading.get_ident()
        if self._owner_thread_id is not None and self._owner_thread_id != current:
            raise AssertionError(
                f"VFS already owned by thread {self._owner_thread_id}, "
                f"cannot claim from thread {current}"
            )
        self._owner_thread_id = current

    def release_thread(self) -> None:
        """Release thread ownership of this VFS."""
        current = threading.get_ident()
        if self._owner_thread_id != current:
            raise AssertionError(
                f"VFS owned by thread {self._owner_thread_id}, cannot release from thread {current}"
            )
        self._owner_thread_id = None

    def _assert_owner(self) -> None:
        """Assert that the current thread owns this VFS."""
        current = threading.get_ident()
        if self._owner_thread_id is not None and self._owner_thread_id != current:
            raise AssertionError(
                f"VFS owned by thread {self._owner_thread_id}, accessed from thread {current}"
            )

    @abstractmethod
    def read_file(self, path: str) -> str:
        """Read file content"""
        pass

    @abstractmethod
    def write_file(self, path: str, content: str) -> None:
        """Write file content"""
        pass

    @abstractmethod
    def list_files(self) -> list[str]:
        """List all files in the VFS"""
        pass

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        """Check if file exists"""
        pass

    @abstractmethod
    def delete_file(self, path: str) -> None:
        """Delete a file"""
        pass
