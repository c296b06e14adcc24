"""Tool execution with logging and error handling."""

import logging
import time
from typing import Any

from ggmcp.logging import safe_log_args
from ggmcp.tools.base import ToolResult
from ggmcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def _truncate(text: str, max_len: int) -> str:
    """Truncate text with ellipsis if needed."""
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."


def unknown_tool_message(name: str) -> str:
    return f"unknown tool `{name}`"


class ToolExecutor:
    """Runs registered tools and normalizes every outcome to a ToolResult.

    Both protocol generations go through this one entry point so they
    always agree on whether a call succeeded.
    """

    def __init__(self, registry: ToolRegistry):
        self._registry = registry

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def execute(self, tool_name: str, arguments: dict[str, Any]) -> ToolResult:
        tool = self._registry.lookup(tool_name)
        if tool is None:
            logger.warning("tool_not_found", extra={"tool.name": tool_name})
            return ToolResult.error(unknown_tool_message(tool_name))

        if missing := tool.missing_arguments(arguments):
            return ToolResult.error(
                f"Missing required parameter: {', '.join(missing)}"
            )

        logger.debug(f"Tool {tool_name} input: {safe_log_args(arguments)}")

        start_time = time.monotonic()
        try:
            result = await tool.execute(arguments)
        except Exception as e:
            logger.exception("tool_execution_failed", extra={"tool.name": tool_name})
            result = ToolResult.error(f"Error in {tool_name}: {e}")

        duration_ms = int((time.monotonic() - start_time) * 1000)

        log_extra: dict[str, Any] = {
            "tool.name": tool_name,
            "tool.arguments": safe_log_args(arguments),
            "duration_ms": duration_ms,
        }
        if result.is_error:
            log_extra["error.message"] = _truncate(result.message or "", 500)
            logger.error("tool_executed", extra=log_extra)
        else:
            logger.info("tool_executed", extra=log_extra)
            logger.debug(
                f"Tool {tool_name} result: {_truncate(repr(result.payload), 200)}"
            )

        return result
