"""
Side effects that tools can declare in their return values.

Tools are pure functions that operate on the VFS, but the session runner
needs to know what changed in a turn. Rather than special-casing command
names, tools declare their side effects explicitly.
"""

from enum import Enum


class SideEffect(str, Enum):
    """Side effects a tool can declare.

    Inherits from str so it's JSON-serializable automatically.
    """

    # Result must include "modified_files": [list of filepaths]
    FILES_MODIFIED = "files_modified"

    # Result must include "new_files": [list of filepaths]
    NEW_FILES_CREATED = "new_files_created"

    # Result must include "deleted_files": [list of filepaths]
    FILES_DELETED = "files_deleted"

    # Result must include "renamed_files": [[old, new], ...]
    FILES_RENAMED = "files_renamed"
