"""
Centralized constants for uigen.

Tool names, command discriminators and the project conventions the preview
bundler relies on.
"""

# Tool names as the agent sees them
EDITOR_TOOL = "str_replace_editor"
FILE_MANAGER_TOOL = "file_manager"

EDITOR_COMMANDS = ("create", "view", "str_replace", "insert", "undo_edit")
FILE_MANAGER_COMMANDS = ("rename", "delete")

# Project conventions (enforced by the bundler, not by the engine)
ENTRYPOINT = "/App.jsx"

# Per-file undo depth
DEFAULT_HISTORY_LIMIT = 100

# Git export
DEFAULT_EXPORT_BRANCH = "uigen/project"
DEFAULT_AUTHOR_NAME = "uigen"
DEFAULT_AUTHOR_EMAIL = "agent@uigen.dev"
