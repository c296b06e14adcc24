"""Response envelopes for both protocol generations.

A tool outcome is projected independently into the legacy envelope and
into the MCP ``content`` result, so the two surfaces can differ only in
serialization, never in whether a call succeeded.
"""

import json
from enum import Enum
from typing import Any

from ggmcp.rpc.protocol import RequestId, RPCResponse
from ggmcp.tools.base import ToolResult


class Protocol(Enum):
    LEGACY = "legacy"
    RPC = "rpc"


def stringify(payload: Any) -> str:
    """Render a payload as text; non-strings become sorted-key JSON."""
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, sort_keys=True, ensure_ascii=False, default=str)


def legacy_envelope(result: ToolResult) -> dict[str, Any]:
    """``{status, error}`` with exactly one of them non-null."""
    if result.is_error:
        return {"status": None, "error": result.message or "Unknown error"}
    return {"status": result.payload, "error": None}


def legacy_error(message: str) -> dict[str, Any]:
    return {"status": None, "error": message}


def mcp_content(result: ToolResult) -> dict[str, Any]:
    """The ``result`` member of a tools/call response."""
    if result.is_error:
        text = result.message or "Unknown error"
    else:
        text = stringify(result.payload)
    return {
        "content": [{"type": "text", "text": text}],
        "isError": result.is_error,
    }


def build_envelope(
    protocol: Protocol, result: ToolResult, id: RequestId = None
) -> dict[str, Any]:
    """Serialize a tool outcome for the protocol the caller used."""
    if protocol is Protocol.LEGACY:
        return legacy_envelope(result)
    return RPCResponse.success(id, mcp_content(result)).to_dict()
