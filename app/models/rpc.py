"""JSON-RPC 2.0 envelopes and the per-call invocation request."""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Union

from app.infra.error_handler import ProtocolError, ErrorCode

JSONRPC_VERSION = "2.0"

RequestId = Union[int, str, None]


@dataclass
class JsonRpcRequest:
    """JSON-RPC 2.0 request."""
    method: str
    params: Dict[str, Any] = field(default_factory=dict)
    id: RequestId = None
    has_id: bool = True

    @property
    def is_notification(self) -> bool:
        return not self.has_id or self.method.startswith("notifications/")

    @classmethod
    def from_dict(cls, data: Any) -> "JsonRpcRequest":
        """
        Build a request from a decoded JSON value.

        Raises:
            ProtocolError: If the value is not a well-formed request
        """
        if not isinstance(data, dict):
            raise ProtocolError("Invalid request: expected a JSON object")

        method = data.get("method")
        if not isinstance(method, str) or not method:
            raise ProtocolError("Invalid request: missing method")

        params = data.get("params")
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise ProtocolError("Invalid request: params must be an object", ErrorCode.INVALID_PARAMS)

        return cls(method=method, params=params, id=data.get("id"), has_id="id" in data)


@dataclass
class InvocationRequest:
    """A tool name plus its raw argument mapping."""
    name: str
    arguments: Any = None

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "InvocationRequest":
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise ProtocolError("Invalid params: tool name is required", ErrorCode.INVALID_PARAMS)
        return cls(name=name, arguments=params.get("arguments"))


def rpc_result(request_id: RequestId, result: Any) -> Dict[str, Any]:
    """Build a JSON-RPC success response."""
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def rpc_error(request_id: RequestId, error: Dict[str, Any]) -> Dict[str, Any]:
    """Build a JSON-RPC error response."""
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}
