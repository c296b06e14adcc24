"""Built-in tools."""

from pathlib import Path

from ggmcp.tools.base import Tool
from ggmcp.tools.builtin.editor import (
    EditorHost,
    GetAllOpenFilePathsTool,
    GetOpenInEditorFilePathTool,
    GetOpenInEditorFileTextTool,
    GetSelectedInEditorTextTool,
    HeadlessEditorHost,
)
from ggmcp.tools.builtin.files import (
    CreateNewFileWithTextTool,
    FindFilesByNameSubstringTool,
    GetFileTextByPathTool,
    ListFilesInFolderTool,
    ReplaceFileTextByPathTool,
    SearchInFilesContentTool,
)
from ggmcp.tools.builtin.vcs import FindCommitByMessageTool, GetProjectVcsStatusTool


def builtin_tools(project_root: Path, editor_host: EditorHost | None = None) -> list[Tool]:
    """All built-in tools, in listing order."""
    host = editor_host or HeadlessEditorHost()
    return [
        GetOpenInEditorFileTextTool(host),
        GetOpenInEditorFilePathTool(host),
        GetSelectedInEditorTextTool(host),
        GetAllOpenFilePathsTool(host),
        GetFileTextByPathTool(project_root),
        ReplaceFileTextByPathTool(project_root),
        CreateNewFileWithTextTool(project_root),
        ListFilesInFolderTool(project_root),
        FindFilesByNameSubstringTool(project_root),
        SearchInFilesContentTool(project_root),
        GetProjectVcsStatusTool(project_root),
        FindCommitByMessageTool(project_root),
    ]


__all__ = [
    "CreateNewFileWithTextTool",
    "EditorHost",
    "FindCommitByMessageTool",
    "FindFilesByNameSubstringTool",
    "GetAllOpenFilePathsTool",
    "GetFileTextByPathTool",
    "GetOpenInEditorFilePathTool",
    "GetOpenInEditorFileTextTool",
    "GetProjectVcsStatusTool",
    "GetSelectedInEditorTextTool",
    "HeadlessEditorHost",
    "ListFilesInFolderTool",
    "ReplaceFileTextByPathTool",
    "SearchInFilesContentTool",
    "builtin_tools",
]
