"""Shared fixtures."""

import pytest
from PySide6.QtCore import QCoreApplication

from uigen.tools.manager import ToolManager
from uigen.vfs.memory import InMemoryVFS


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    """Signals are delivered directly, but QObjects want an application instance."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def vfs():
    return InMemoryVFS()


@pytest.fixture
def manager(vfs):
    return ToolManager(vfs, session_id="test-session")
