"""Tool system: interface, registry, executor and built-in tools."""

from pathlib import Path

from ggmcp.tools.base import Tool, ToolResult
from ggmcp.tools.builtin import EditorHost, HeadlessEditorHost, builtin_tools
from ggmcp.tools.executor import ToolExecutor
from ggmcp.tools.registry import ToolRegistry


def create_default_registry(
    project_root: Path, editor_host: EditorHost | None = None
) -> ToolRegistry:
    """Build the registry of built-in tools for a project."""
    return ToolRegistry(builtin_tools(project_root, editor_host))


__all__ = [
    "EditorHost",
    "HeadlessEditorHost",
    "Tool",
    "ToolExecutor",
    "ToolRegistry",
    "ToolResult",
    "create_default_registry",
]
