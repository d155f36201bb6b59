"""Git export of project snapshots"""

from uigen.git_backend.repository import ProjectRepository

__all__ = ["ProjectRepository"]
