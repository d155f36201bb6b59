"""Virtual filesystem for session project trees"""

from uigen.vfs.base import VFS, normalize_path
from uigen.vfs.memory import InMemoryVFS, VirtualFile

__all__ = ["VFS", "InMemoryVFS", "VirtualFile", "normalize_path"]
