"""Wire protocols: JSON-RPC 2.0 and the legacy per-tool surface."""

from ggmcp.rpc.envelope import Protocol, build_envelope, legacy_envelope, mcp_content
from ggmcp.rpc.handler import HandlerResponse, ProtocolHandler
from ggmcp.rpc.protocol import ErrorCode, RPCError, RPCRequest, RPCResponse

__all__ = [
    "ErrorCode",
    "HandlerResponse",
    "Protocol",
    "ProtocolHandler",
    "RPCError",
    "RPCRequest",
    "RPCResponse",
    "build_envelope",
    "legacy_envelope",
    "mcp_content",
]
