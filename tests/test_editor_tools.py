"""Tests for the editor-state tools."""

from ggmcp.tools.builtin import builtin_tools
from ggmcp.tools.builtin.editor import (
    GetAllOpenFilePathsTool,
    GetOpenInEditorFilePathTool,
    GetOpenInEditorFileTextTool,
    GetSelectedInEditorTextTool,
    HeadlessEditorHost,
)


class FakeEditorHost:
    def __init__(self):
        self.path = "/work/src/main.ts"

    def active_file_path(self):
        return self.path

    def active_file_text(self):
        return "export const answer = 42;\n"

    def selected_text(self):
        return "answer"

    def open_file_paths(self):
        return [self.path, "/work/README.md"]


class TestEditorTools:
    async def test_with_attached_editor(self):
        host = FakeEditorHost()

        assert (await GetOpenInEditorFilePathTool(host).execute({})).payload == host.path
        assert (await GetOpenInEditorFileTextTool(host).execute({})).payload.startswith(
            "export"
        )
        assert (await GetSelectedInEditorTextTool(host).execute({})).payload == "answer"
        assert (await GetAllOpenFilePathsTool(host).execute({})).payload == [
            "/work/src/main.ts",
            "/work/README.md",
        ]

    async def test_headless_returns_empty_values(self):
        host = HeadlessEditorHost()

        for tool_class in (
            GetOpenInEditorFilePathTool,
            GetOpenInEditorFileTextTool,
            GetSelectedInEditorTextTool,
        ):
            result = await tool_class(host).execute({})
            assert not result.is_error
            assert result.payload == ""

        result = await GetAllOpenFilePathsTool(host).execute({})
        assert result.payload == []

    def test_schemas_take_no_parameters(self):
        tool = GetOpenInEditorFileTextTool(HeadlessEditorHost())
        assert tool.input_schema == {"type": "object", "properties": {}}


class TestBuiltinTools:
    def test_names_are_unique_and_ordered(self, project_dir):
        names = [tool.name for tool in builtin_tools(project_dir)]

        assert len(names) == len(set(names)) == 12
        assert names[:4] == [
            "get_open_in_editor_file_text",
            "get_open_in_editor_file_path",
            "get_selected_in_editor_text",
            "get_all_open_file_paths",
        ]
        assert names[-1] == "find_commit_by_message"
