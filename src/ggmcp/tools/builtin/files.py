"""Project file tools with project-root boundary enforcement.

Every path argument is a ``pathInProject``: relative to the project
root, with an optional leading slash. Paths that resolve outside the
root are rejected.
"""

import asyncio
import logging
import os
from abc import abstractmethod
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from ggmcp.tools.base import Tool, ToolResult

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_BYTES = 5 * 1024 * 1024  # 5MB
MAX_SEARCH_RESULTS = 1000

# Directories never descended into by searches
IGNORED_DIRS = frozenset({".git", "node_modules", "__pycache__", ".venv"})

# Bytes sniffed when deciding whether a file is binary
BINARY_SNIFF_BYTES = 8192


def _is_probably_binary(path: Path) -> bool:
    try:
        with path.open("rb") as f:
            chunk = f.read(BINARY_SNIFF_BYTES)
    except OSError:
        return True
    return b"\0" in chunk


class ProjectTool(Tool):
    """Base for tools that operate on files under the project root."""

    def __init__(self, project_root: Path) -> None:
        self._root = project_root.resolve()

    @property
    def project_root(self) -> Path:
        return self._root

    def resolve_path(self, path_in_project: str) -> Path | None:
        """Resolve a project-relative path.

        Returns:
            Resolved Path if inside the project, None otherwise.
        """
        relative = path_in_project.replace("\\", "/").lstrip("/")
        try:
            resolved = (self._root / relative).resolve()
        except (OSError, ValueError):
            return None

        try:
            resolved.relative_to(self._root)
        except ValueError:
            return None
        return resolved

    def relative_path(self, path: Path) -> str:
        """Project-relative POSIX path; the root itself is ``""``."""
        relative = path.relative_to(self._root).as_posix()
        return "" if relative == "." else relative

    def iter_project_files(self) -> Iterator[Path]:
        """Walk regular files under the root, skipping ignored directories.

        Blocking; the search tools drive it from a worker thread.
        """
        for dirpath, dirnames, filenames in os.walk(self._root):
            dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRS)
            for filename in sorted(filenames):
                yield Path(dirpath) / filename


class PathTool(ProjectTool):
    """A project tool driven by a single ``pathInProject`` argument."""

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        path_in_project = arguments["pathInProject"]
        if not isinstance(path_in_project, str):
            return ToolResult.error("pathInProject must be a string")

        resolved = self.resolve_path(path_in_project)
        if resolved is None:
            return ToolResult.error(
                f"Path '{path_in_project}' is outside the project directory"
            )
        return await self.execute_path(resolved, path_in_project, arguments)

    @abstractmethod
    async def execute_path(
        self, path: Path, path_in_project: str, arguments: dict[str, Any]
    ) -> ToolResult: ...


class GetFileTextByPathTool(PathTool):
    """Read a project file as text."""

    @property
    def name(self) -> str:
        return "get_file_text_by_path"

    @property
    def description(self) -> str:
        return (
            "Get the text content of a file using its path relative to the "
            "project root. Returns an error if the file does not exist or is "
            "outside the project scope."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "pathInProject": {
                    "type": "string",
                    "description": "File path relative to the project root.",
                },
            },
            "required": ["pathInProject"],
        }

    async def execute_path(
        self, path: Path, path_in_project: str, arguments: dict[str, Any]
    ) -> ToolResult:
        if not path.exists():
            return ToolResult.error(f"File not found: {path_in_project}")
        if not path.is_file():
            return ToolResult.error(f"Not a file: {path_in_project}")

        size = path.stat().st_size
        if size > MAX_FILE_SIZE_BYTES:
            return ToolResult.error(
                f"File too large ({size:,} bytes). "
                f"Maximum size is {MAX_FILE_SIZE_BYTES:,} bytes."
            )

        text = path.read_text(encoding="utf-8", errors="replace")
        logger.debug(f"Read {len(text)} characters from {path}")
        return ToolResult.success(text)


class ReplaceFileTextByPathTool(PathTool):
    """Replace the whole content of an existing project file."""

    @property
    def name(self) -> str:
        return "replace_file_text_by_path"

    @property
    def description(self) -> str:
        return (
            "Replace the entire content of a specified project file with new "
            "text. Returns an error if the file does not exist or cannot be "
            "accessed."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "pathInProject": {"type": "string"},
                "text": {"type": "string"},
            },
            "required": ["pathInProject", "text"],
        }

    async def execute_path(
        self, path: Path, path_in_project: str, arguments: dict[str, Any]
    ) -> ToolResult:
        text = arguments["text"]
        if not isinstance(text, str):
            return ToolResult.error("text must be a string")
        if not path.is_file():
            return ToolResult.error(f"File not found: {path_in_project}")

        path.write_text(text, encoding="utf-8")
        return ToolResult.success(
            {"pathInProject": self.relative_path(path), "size": len(text)}
        )


class CreateNewFileWithTextTool(PathTool):
    """Create a new project file, including missing parent directories."""

    @property
    def name(self) -> str:
        return "create_new_file_with_text"

    @property
    def description(self) -> str:
        return (
            "Create a new file at the specified path in the project directory "
            "and populate it with content. Returns an error if the file "
            "already exists."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "pathInProject": {"type": "string"},
                "text": {"type": "string"},
            },
            "required": ["pathInProject", "text"],
        }

    async def execute_path(
        self, path: Path, path_in_project: str, arguments: dict[str, Any]
    ) -> ToolResult:
        text = arguments["text"]
        if not isinstance(text, str):
            return ToolResult.error("text must be a string")
        if path == self.project_root or path.exists():
            return ToolResult.error(f"File already exists: {path_in_project}")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return ToolResult.success({"pathInProject": self.relative_path(path)})


class ListFilesInFolderTool(PathTool):
    """List the entries of a project folder."""

    @property
    def name(self) -> str:
        return "list_files_in_folder"

    @property
    def description(self) -> str:
        return (
            "List all files and directories in the specified project folder. "
            "Returns an array of entry information."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "pathInProject": {
                    "type": "string",
                    "description": "Folder path relative to the project root; '/' for the root.",
                },
            },
            "required": ["pathInProject"],
        }

    async def execute_path(
        self, path: Path, path_in_project: str, arguments: dict[str, Any]
    ) -> ToolResult:
        if not path.exists():
            return ToolResult.error(f"Directory not found: {path_in_project}")
        if not path.is_dir():
            return ToolResult.error(f"Path is not a directory: {path_in_project}")

        entries = []
        for entry in path.iterdir():
            entries.append(
                {
                    "name": entry.name,
                    "type": "directory" if entry.is_dir() else "file",
                    "pathInProject": self.relative_path(entry),
                }
            )

        # Directories first, then files, each sorted by name
        entries.sort(key=lambda e: (e["type"] != "directory", e["name"]))
        return ToolResult.success(entries)


class FindFilesByNameSubstringTool(ProjectTool):
    """Find project files whose names contain a substring."""

    @property
    def name(self) -> str:
        return "find_files_by_name_substring"

    @property
    def description(self) -> str:
        return (
            "Search for all files in the project whose names contain the "
            "specified substring. Returns an array of file information."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {"nameSubstring": {"type": "string"}},
            "required": ["nameSubstring"],
        }

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        substring = arguments["nameSubstring"]
        if not isinstance(substring, str) or not substring:
            return ToolResult.error("Search string cannot be empty")

        matches = await asyncio.to_thread(self._find_matches, substring)
        logger.debug(f"Found {len(matches)} files matching '{substring}'")
        return ToolResult.success(matches)

    def _find_matches(self, substring: str) -> list[dict[str, str]]:
        matches = []
        for path in self.iter_project_files():
            if substring not in path.name:
                continue
            matches.append(
                {
                    "path": self.relative_path(path),
                    "name": path.name,
                    "directory": self.relative_path(path.parent),
                }
            )
            if len(matches) >= MAX_SEARCH_RESULTS:
                break
        return matches


class SearchInFilesContentTool(ProjectTool):
    """Find project files containing a text substring."""

    @property
    def name(self) -> str:
        return "search_in_files_content"

    @property
    def description(self) -> str:
        return (
            "Search for a text substring within all files in the project. "
            "Returns an array of file information containing matches."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {"searchText": {"type": "string"}},
            "required": ["searchText"],
        }

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        search_text = arguments["searchText"]
        if not isinstance(search_text, str) or not search_text:
            return ToolResult.error("Search text cannot be empty")

        matches = await asyncio.to_thread(self._search, search_text)
        logger.debug(f"Found {len(matches)} files containing the search text")
        return ToolResult.success(matches)

    def _search(self, search_text: str) -> list[dict[str, str]]:
        matches = []
        for path in self.iter_project_files():
            try:
                if path.stat().st_size > MAX_FILE_SIZE_BYTES:
                    continue
                if _is_probably_binary(path):
                    continue
                content = path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.debug(f"Skipping file {path}: {e}")
                continue

            if search_text in content:
                matches.append({"path": self.relative_path(path)})
                if len(matches) >= MAX_SEARCH_RESULTS:
                    break
        return matches
