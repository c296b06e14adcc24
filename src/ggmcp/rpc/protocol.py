"""JSON-RPC 2.0 message types."""

from dataclasses import dataclass, field
from typing import Any

JSONRPC_VERSION = "2.0"

RequestId = int | str | None


# JSON-RPC 2.0 error codes
class ErrorCode:
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


@dataclass
class RPCRequest:
    """JSON-RPC 2.0 request.

    ``params`` is kept exactly as received; validating its shape is up to
    the method that consumes it.
    """

    method: Any
    params: Any = field(default_factory=dict)
    id: RequestId = None
    jsonrpc: str = JSONRPC_VERSION

    @property
    def is_notification(self) -> bool:
        return self.id is None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RPCRequest":
        params = data.get("params")
        return cls(
            method=data.get("method"),
            params={} if params is None else params,
            id=data.get("id"),
            jsonrpc=data.get("jsonrpc", ""),
        )

    @staticmethod
    def is_rpc_payload(data: Any) -> bool:
        """Whether a parsed body claims to be a JSON-RPC 2.0 request."""
        return isinstance(data, dict) and data.get("jsonrpc") == JSONRPC_VERSION


@dataclass
class RPCError:
    """JSON-RPC 2.0 error."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            d["data"] = self.data
        return d


@dataclass
class RPCResponse:
    """JSON-RPC 2.0 response."""

    id: RequestId
    result: Any = None
    error: RPCError | None = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            d["error"] = self.error.to_dict()
        else:
            d["result"] = self.result
        return d

    @classmethod
    def success(cls, id: RequestId, result: Any) -> "RPCResponse":
        return cls(id=id, result=result)

    @classmethod
    def error_response(
        cls, id: RequestId, code: int, message: str, data: Any = None
    ) -> "RPCResponse":
        return cls(id=id, error=RPCError(code=code, message=message, data=data))
