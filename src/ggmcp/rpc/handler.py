"""Protocol handler: classifies requests and dispatches them to tools.

Two protocol generations share one tool registry:

- JSON-RPC 2.0 (any POST whose body is ``{"jsonrpc": "2.0", ...}``),
  answering ``initialize``, ``tools/list`` and ``tools/call``.
- Legacy per-tool paths, ``/api/mcp/<tool>`` or ``/mcp/<tool>``, whose
  POST body is the raw arguments mapping.

Classification happens once per request and is exclusive: a request
that is classified as one generation is never retried as the other.
"""

import json
import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ggmcp.rpc.envelope import Protocol, build_envelope, legacy_error, mcp_content
from ggmcp.rpc.protocol import ErrorCode, RequestId, RPCRequest, RPCResponse
from ggmcp.tools.builtin.editor import EditorHost, HeadlessEditorHost
from ggmcp.tools.executor import ToolExecutor

logger = logging.getLogger(__name__)

MCP_PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "ggmcp"
SERVER_VERSION = "0.1.0"

LEGACY_PREFIXES = ("/api/mcp/", "/mcp/")

# Legacy names answered by the handler itself instead of a tool
LIST_TOOLS_ENDPOINT = "list_tools"
STATUS_ENDPOINT = "status"
ENUMERATION_ENDPOINTS = frozenset({LIST_TOOLS_ENDPOINT, STATUS_ENDPOINT})

MethodHandler = Callable[[dict[str, Any]], Awaitable[Any]]


class InvalidParamsError(Exception):
    """Params are structurally invalid for a recognized method."""


class InvalidBodyError(Exception):
    """The request body is not valid JSON."""


@dataclass
class HandlerResponse:
    """One HTTP response: status code plus JSON body."""

    status_code: int
    content: dict[str, Any]


def legacy_tool_name(path: str) -> str | None:
    """Extract the tool name from a legacy path.

    Returns:
        The trailing path segment ("" if missing) for legacy paths,
        None for any other path.
    """
    for prefix in LEGACY_PREFIXES:
        if path.startswith(prefix):
            remainder = path[len(prefix) :].strip("/")
            return remainder.rsplit("/", 1)[-1]
    return None


def parse_body(body: bytes) -> Any:
    """Parse a request body; an empty body parses to None.

    Raises:
        InvalidBodyError: If the body is not valid UTF-8 JSON, or nests
            deeper than the decoder can recurse.
    """
    if not body or not body.strip():
        return None
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidBodyError(f"Invalid JSON body: {e}") from e
    except RecursionError as e:
        raise InvalidBodyError("Invalid JSON body: nesting too deep") from e


def _request_id(data: Any) -> RequestId:
    if not isinstance(data, dict):
        return None
    request_id = data.get("id")
    if isinstance(request_id, bool) or not isinstance(request_id, int | str):
        return None
    return request_id


class ProtocolHandler:
    """Turns (HTTP method, path, body) into exactly one response.

    Holds no per-request state, so concurrent requests need no locking.
    """

    def __init__(
        self,
        executor: ToolExecutor,
        project_root: Path,
        editor_host: EditorHost | None = None,
    ) -> None:
        self._executor = executor
        self._project_root = project_root
        self._editor_host = editor_host or HeadlessEditorHost()
        self._methods: dict[str, MethodHandler] = {
            "initialize": self._initialize,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
        }

    async def handle(self, http_method: str, path: str, body: bytes) -> HandlerResponse:
        try:
            return await self._route(http_method.upper(), path, body)
        except Exception as e:
            # handle_rpc answers its own faults as JSON-RPC errors
            logger.exception("request_failed", extra={"http.path": path})
            return HandlerResponse(500, legacy_error(f"Internal error: {e}"))

    async def _route(self, http_method: str, path: str, body: bytes) -> HandlerResponse:
        tool_name = legacy_tool_name(path)

        if http_method == "GET":
            if tool_name in ENUMERATION_ENDPOINTS:
                return HandlerResponse(200, self._enumerate(tool_name))
            return HandlerResponse(405, legacy_error(f"GET is not supported for {path}"))

        if http_method != "POST":
            return HandlerResponse(
                405, legacy_error(f"{http_method} is not supported for {path}")
            )

        try:
            data = parse_body(body)
        except InvalidBodyError as e:
            logger.warning("invalid_request_body", extra={"http.path": path})
            return HandlerResponse(400, legacy_error(str(e)))

        if RPCRequest.is_rpc_payload(data):
            return HandlerResponse(200, await self.handle_rpc(data))

        if tool_name is not None:
            return await self.handle_legacy(tool_name, data)

        if path == "/":
            return HandlerResponse(
                200,
                RPCResponse.error_response(
                    _request_id(data),
                    ErrorCode.INVALID_REQUEST,
                    'Invalid request: jsonrpc must be "2.0"',
                ).to_dict(),
            )

        return HandlerResponse(404, legacy_error(f"No route for {path}"))

    # ------------------------------------------------------------------
    # JSON-RPC
    # ------------------------------------------------------------------

    async def handle_rpc(self, data: dict[str, Any]) -> dict[str, Any]:
        """Dispatch a JSON-RPC 2.0 request object.

        Protocol faults become JSON-RPC ``error`` members; tool failures
        never do.
        """
        request = RPCRequest.from_dict(data)
        request_id = _request_id(data)

        if not isinstance(request.method, str) or not request.method:
            return RPCResponse.error_response(
                request_id,
                ErrorCode.INVALID_REQUEST,
                "Invalid request: method is required",
            ).to_dict()

        logger.debug(
            "rpc_request",
            extra={
                "rpc.method": request.method,
                "rpc.id": request_id,
                "rpc.notification": request.is_notification,
            },
        )

        handler = self._methods.get(request.method)
        if handler is None:
            return RPCResponse.error_response(
                request_id,
                ErrorCode.METHOD_NOT_FOUND,
                f"Method not found: {request.method}",
            ).to_dict()

        if not isinstance(request.params, dict):
            return RPCResponse.error_response(
                request_id,
                ErrorCode.INVALID_PARAMS,
                "Invalid params: params must be an object",
            ).to_dict()

        try:
            result = await handler(request.params)
        except InvalidParamsError as e:
            return RPCResponse.error_response(
                request_id, ErrorCode.INVALID_PARAMS, f"Invalid params: {e}"
            ).to_dict()
        except Exception as e:
            logger.exception("rpc_method_failed", extra={"rpc.method": request.method})
            return RPCResponse.error_response(
                request_id, ErrorCode.INTERNAL_ERROR, f"Internal error: {e}"
            ).to_dict()

        return RPCResponse.success(request_id, result).to_dict()

    async def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        logger.info("client_initialized", extra={"client": params.get("clientInfo")})
        return {
            "protocolVersion": MCP_PROTOCOL_VERSION,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
        }

    async def _tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"tools": self._executor.registry.get_definitions()}

    async def _tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidParamsError("name is required")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError("arguments must be an object")

        result = await self._executor.execute(name, arguments)
        return mcp_content(result)

    # ------------------------------------------------------------------
    # Legacy
    # ------------------------------------------------------------------

    async def handle_legacy(self, tool_name: str, data: Any) -> HandlerResponse:
        """Run a legacy per-tool request; the body is the arguments mapping."""
        if tool_name in ENUMERATION_ENDPOINTS:
            return HandlerResponse(200, self._enumerate(tool_name))

        if not tool_name:
            return HandlerResponse(404, legacy_error("Missing tool name in path"))

        if data is None:
            data = {}
        if not isinstance(data, dict):
            return HandlerResponse(
                400, legacy_error("Request body must be a JSON object of arguments")
            )

        result = await self._executor.execute(tool_name, data)
        return HandlerResponse(200, build_envelope(Protocol.LEGACY, result))

    def _enumerate(self, endpoint: str) -> dict[str, Any]:
        if endpoint == LIST_TOOLS_ENDPOINT:
            return {"status": self._executor.registry.get_definitions(), "error": None}
        return {"status": self.status(), "error": None}

    def status(self) -> dict[str, Any]:
        """Running state and the editor environment."""
        root = str(self._project_root)
        active_file = self._editor_host.active_file_path() or ""
        return {
            "status": "running",
            "environment": {
                "workspaceRoot": root,
                "activeFile": active_file,
                "currentDirectory": os.path.dirname(active_file) if active_file else root,
                "openFiles": list(self._editor_host.open_file_paths()),
            },
        }
