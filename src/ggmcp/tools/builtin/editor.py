"""Editor-state tools.

The editor itself belongs to the embedding process, which supplies an
``EditorHost``. Without an attached editor the headless host reports no
active document, and the tools return empty values rather than errors.
"""

from typing import Any, Protocol

from ggmcp.tools.base import Tool, ToolResult

EMPTY_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}


class EditorHost(Protocol):
    """Read access to the host editor's live state."""

    def active_file_path(self) -> str | None: ...

    def active_file_text(self) -> str | None: ...

    def selected_text(self) -> str | None: ...

    def open_file_paths(self) -> list[str]: ...


class HeadlessEditorHost:
    """EditorHost used when no editor is attached."""

    def active_file_path(self) -> str | None:
        return None

    def active_file_text(self) -> str | None:
        return None

    def selected_text(self) -> str | None:
        return None

    def open_file_paths(self) -> list[str]:
        return []


class EditorTool(Tool):
    def __init__(self, host: EditorHost) -> None:
        self._host = host

    @property
    def input_schema(self) -> dict[str, Any]:
        return EMPTY_SCHEMA


class GetOpenInEditorFileTextTool(EditorTool):
    @property
    def name(self) -> str:
        return "get_open_in_editor_file_text"

    @property
    def description(self) -> str:
        return (
            "Retrieve the complete text content of the file currently open in "
            "the editor. Returns an empty string if no file is open."
        )

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        return ToolResult.success(self._host.active_file_text() or "")


class GetOpenInEditorFilePathTool(EditorTool):
    @property
    def name(self) -> str:
        return "get_open_in_editor_file_path"

    @property
    def description(self) -> str:
        return (
            "Get the absolute path of the file currently open in the editor. "
            "Returns an empty string if no file is open."
        )

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        return ToolResult.success(self._host.active_file_path() or "")


class GetSelectedInEditorTextTool(EditorTool):
    @property
    def name(self) -> str:
        return "get_selected_in_editor_text"

    @property
    def description(self) -> str:
        return (
            "Retrieve the currently selected text in the active editor. "
            "Returns an empty string if nothing is selected."
        )

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        return ToolResult.success(self._host.selected_text() or "")


class GetAllOpenFilePathsTool(EditorTool):
    @property
    def name(self) -> str:
        return "get_all_open_file_paths"

    @property
    def description(self) -> str:
        return "List the absolute paths of all files currently open in the editor."

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        return ToolResult.success(list(self._host.open_file_paths()))
