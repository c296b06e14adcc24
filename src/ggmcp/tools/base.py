"""Abstract tool interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a tool execution.

    Exactly one of two cases: a success carrying a structured payload,
    or a failure carrying a message. Payloads stay structured; they are
    only turned into text when a response envelope is serialized.
    """

    payload: Any = None
    message: str | None = None
    is_error: bool = False

    @classmethod
    def success(cls, payload: Any = "") -> "ToolResult":
        """Create a successful result; a None payload becomes "".

        A success never carries a null payload, so its legacy envelope
        always has a non-null ``status``.
        """
        return cls(payload="" if payload is None else payload)

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        """Create an error result."""
        return cls(message=message, is_error=True)


class Tool(ABC):
    """Abstract base class for tools.

    A tool is a named operation exposed over both protocol generations.
    Implementations report expected failures by returning
    ``ToolResult.error``; anything they raise is converted to a failure
    by the executor.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this tool."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description."""
        ...

    @property
    @abstractmethod
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema for tool input parameters."""
        ...

    @abstractmethod
    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        """Execute the tool with the given arguments.

        Args:
            arguments: Tool input matching the input_schema.

        Returns:
            Tool execution result.
        """
        ...

    def missing_arguments(self, arguments: dict[str, Any]) -> list[str]:
        """Names of required parameters absent from ``arguments``."""
        required = self.input_schema.get("required", [])
        return [key for key in required if arguments.get(key) is None]

    def to_definition(self) -> dict[str, Any]:
        """Convert to the listing entry used by tools/list and list_tools."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }
