"""
Tests for parsing raw tool calls into commands.
"""

import pytest

from uigen.errors import ValidationError
from uigen.tools.commands import (
    Create,
    Delete,
    Insert,
    Rename,
    Replace,
    UndoEdit,
    View,
    parse_command,
)


class TestEditorCommands:
    def test_create(self):
        command = parse_command(
            "str_replace_editor",
            {"command": "create", "path": "App.jsx", "file_text": "export default 1"},
        )
        assert command == Create("/App.jsx", "export default 1")

    def test_create_allows_empty_file(self):
        command = parse_command(
            "str_replace_editor", {"command": "create", "path": "/empty.js", "file_text": ""}
        )
        assert command.content == ""

    def test_create_requires_file_text(self):
        with pytest.raises(ValidationError, match="file_text"):
            parse_command("str_replace_editor", {"command": "create", "path": "/App.jsx"})

    def test_view_with_and_without_range(self):
        assert parse_command("str_replace_editor", {"command": "view", "path": "/a.js"}) == View(
            "/a.js"
        )
        command = parse_command(
            "str_replace_editor", {"command": "view", "path": "/a.js", "view_range": [2, -1]}
        )
        assert command.view_range == (2, -1)

    @pytest.mark.parametrize("bad_range", [[1], [1, 2, 3], ["1", "2"], "1-2", [True, 2]])
    def test_view_rejects_malformed_range(self, bad_range):
        with pytest.raises(ValidationError, match="view_range"):
            parse_command(
                "str_replace_editor",
                {"command": "view", "path": "/a.js", "view_range": bad_range},
            )

    def test_str_replace(self):
        command = parse_command(
            "str_replace_editor",
            {"command": "str_replace", "path": "/a.js", "old_str": "foo", "new_str": "bar"},
        )
        assert command == Replace("/a.js", "foo", "bar")

    def test_str_replace_new_str_defaults_to_empty(self):
        command = parse_command(
            "str_replace_editor", {"command": "str_replace", "path": "/a.js", "old_str": "foo"}
        )
        assert command.replacement == ""

    def test_str_replace_rejects_empty_old_str(self):
        with pytest.raises(ValidationError, match="old_str"):
            parse_command(
                "str_replace_editor",
                {"command": "str_replace", "path": "/a.js", "old_str": "", "new_str": "x"},
            )

    def test_str_replace_rejects_non_string_new_str(self):
        with pytest.raises(ValidationError, match="new_str"):
            parse_command(
                "str_replace_editor",
                {"command": "str_replace", "path": "/a.js", "old_str": "a", "new_str": 5},
            )

    def test_insert(self):
        command = parse_command(
            "str_replace_editor",
            {"command": "insert", "path": "/a.js", "insert_line": 3, "new_str": "x"},
        )
        assert command == Insert("/a.js", 3, "x")

    @pytest.mark.parametrize("line", [None, "3", 1.5, True])
    def test_insert_requires_integer_line(self, line):
        args = {"command": "insert", "path": "/a.js", "new_str": "x"}
        if line is not None:
            args["insert_line"] = line
        with pytest.raises(ValidationError, match="insert_line"):
            parse_command("str_replace_editor", args)

    def test_insert_rejects_empty_text(self):
        with pytest.raises(ValidationError, match="'new_str' must not be empty"):
            parse_command(
                "str_replace_editor",
                {"command": "insert", "path": "/a.js", "insert_line": 0, "new_str": ""},
            )

    def test_undo_edit(self):
        command = parse_command("str_replace_editor", {"command": "undo_edit", "path": "/a.js"})
        assert command == UndoEdit("/a.js")


class TestFileManagerCommands:
    def test_rename_normalizes_both_paths(self):
        command = parse_command(
            "file_manager", {"command": "rename", "path": "old.jsx", "new_path": "dir//new.jsx"}
        )
        assert command == Rename("/old.jsx", "/dir/new.jsx")

    def test_rename_requires_new_path(self):
        with pytest.raises(ValidationError, match="new_path"):
            parse_command("file_manager", {"command": "rename", "path": "/old.jsx"})

    def test_delete(self):
        assert parse_command("file_manager", {"command": "delete", "path": "/x.js"}) == Delete(
            "/x.js"
        )

    def test_editor_command_not_accepted_by_file_manager(self):
        with pytest.raises(ValidationError, match="Unknown command"):
            parse_command("file_manager", {"command": "create", "path": "/x.js", "file_text": ""})


class TestMalformedCalls:
    def test_unknown_tool(self):
        with pytest.raises(ValidationError, match="Unknown tool: shell"):
            parse_command("shell", {"command": "run"})

    def test_unknown_command(self):
        with pytest.raises(ValidationError, match="Unknown command"):
            parse_command("str_replace_editor", {"command": "frobnicate", "path": "/a.js"})

    def test_missing_command(self):
        with pytest.raises(ValidationError):
            parse_command("str_replace_editor", {"path": "/a.js"})

    @pytest.mark.parametrize("args", [None, "not a dict", ["command", "view"]])
    def test_args_must_be_object(self, args):
        with pytest.raises(ValidationError, match="args must be an object"):
            parse_command("str_replace_editor", args)

    @pytest.mark.parametrize("path", [None, "", "   ", 7])
    def test_path_required(self, path):
        args = {"command": "view"}
        if path is not None:
            args["path"] = path
        with pytest.raises(ValidationError, match="'path'"):
            parse_command("str_replace_editor", args)

    def test_root_path_rejected(self):
        with pytest.raises(ValidationError):
            parse_command("file_manager", {"command": "delete", "path": "/"})
