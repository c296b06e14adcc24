"""Version control tools backed by the git CLI."""

import asyncio
import logging
from pathlib import Path
from typing import Any

from ggmcp.tools.base import ToolResult
from ggmcp.tools.builtin.files import ProjectTool

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 30
MAX_COMMIT_MATCHES = 10

# Porcelain v1 status letters -> change type names reported to callers
_STATUS_TYPES = {
    "A": "ADDITION",
    "D": "DELETION",
    "R": "MOVED",
    "C": "ADDITION",
    "M": "MODIFICATION",
    "T": "MODIFICATION",
    "U": "MODIFICATION",
}


class GitCommandError(Exception):
    """git exited non-zero or could not be run."""


async def run_git(root: Path, *args: str) -> str:
    """Run a git command in ``root`` and return its stdout.

    Raises:
        GitCommandError: If git is missing, times out, or exits non-zero.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            "git",
            *args,
            cwd=str(root),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (FileNotFoundError, OSError) as e:
        raise GitCommandError(f"git is not available: {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(
            proc.communicate(), timeout=GIT_TIMEOUT_SECONDS
        )
    except TimeoutError as e:
        proc.kill()
        await proc.wait()
        raise GitCommandError(f"git {args[0]} timed out") from e

    if proc.returncode != 0:
        raise GitCommandError(stderr.decode(errors="replace").strip())
    return stdout.decode(errors="replace")


def parse_porcelain_status(output: str) -> list[dict[str, str]]:
    """Parse ``git status --porcelain`` (v1) output into change entries."""
    changes = []
    for line in output.splitlines():
        if len(line) < 4:
            continue
        code, path = line[:2], line[3:]

        if code == "??":
            change_type = "UNVERSIONED"
        else:
            # Index status wins over worktree status when both are set
            letter = code[0] if code[0] != " " else code[1]
            change_type = _STATUS_TYPES.get(letter, "MODIFICATION")

        if " -> " in path:
            path = path.split(" -> ", 1)[1]
        changes.append({"path": path.strip('"'), "type": change_type})
    return changes


class GetProjectVcsStatusTool(ProjectTool):
    """Report changed files in the project's git working tree."""

    @property
    def name(self) -> str:
        return "get_project_vcs_status"

    @property
    def description(self) -> str:
        return (
            "Retrieves the current version control status of files in the "
            "project. Returns a list of changed files, each with a path "
            "relative to the project root and a change type (MODIFICATION, "
            "ADDITION, DELETION, MOVED, UNVERSIONED). Returns an empty list "
            "if no changes are detected or VCS is not configured."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {"type": "object", "properties": {}}

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        try:
            output = await run_git(self.project_root, "status", "--porcelain")
        except GitCommandError as e:
            logger.info(f"No VCS status available: {e}")
            return ToolResult.success([])

        changes = parse_porcelain_status(output)
        logger.debug(f"Found {len(changes)} changed files in VCS")
        return ToolResult.success(changes)


class FindCommitByMessageTool(ProjectTool):
    """Search commit history by message text."""

    @property
    def name(self) -> str:
        return "find_commit_by_message"

    @property
    def description(self) -> str:
        return (
            "Searches for commits whose message contains the provided text. "
            f"Returns up to {MAX_COMMIT_MATCHES} matching commit hashes, "
            "newest first."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {"text": {"type": "string"}},
            "required": ["text"],
        }

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        text = arguments["text"]
        if not isinstance(text, str) or not text:
            return ToolResult.error("Search text cannot be empty")

        try:
            output = await run_git(
                self.project_root,
                "log",
                "--fixed-strings",
                f"--grep={text}",
                "--format=%H",
                "-n",
                str(MAX_COMMIT_MATCHES),
            )
        except GitCommandError as e:
            logger.info(f"Commit search unavailable: {e}")
            return ToolResult.success([])

        return ToolResult.success([line for line in output.splitlines() if line])
