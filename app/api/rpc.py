"""JSON-RPC method handling shared by the HTTP and stdio carriers."""

import json
import logging
from typing import Dict, Any, Optional, Union

from app.infra.error_handler import (
    ErrorCode,
    ProtocolError,
    ToolError,
    to_rpc_error,
)
from app.infra.metrics import rpc_requests_total
from app.models.rpc import InvocationRequest, JsonRpcRequest, rpc_error, rpc_result
from app.services.tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "1.0"
SERVER_NAME = "vps-mcp-server"
SERVER_VERSION = "1.0.0"


class RpcHandler:
    """
    Routes JSON-RPC requests to the tool registry.

    Protocol methods:
        - "initialize"   → static server identity and capabilities
        - "tools/list"   → registered tool schemas
        - "tools/invoke" → run a tool ("tools/call" is accepted as an alias)
        - "ping"         → health check

    Every failure is turned into a JSON-RPC error object; nothing raised
    by a tool reaches the carrier.
    """

    def __init__(self, registry: ToolRegistry, carrier: str = "http", answer_notifications: bool = False):
        """
        Args:
            registry: Tool catalog and dispatcher
            carrier: Carrier label for metrics ("http" or "stdio")
            answer_notifications: Reply even to requests without an id
                (request/response carriers must always send a body)
        """
        self.registry = registry
        self.carrier = carrier
        self.answer_notifications = answer_notifications
        self._methods = {
            "initialize": self._initialize,
            "tools/list": self._list_tools,
            "tools/invoke": self._invoke_tool,
            "tools/call": self._invoke_tool,
            "ping": self._ping,
        }

    async def handle_raw(self, raw: Union[str, bytes]) -> Optional[Dict[str, Any]]:
        """Decode one frame and handle it; parse errors become error responses."""
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            rpc_requests_total.labels(carrier=self.carrier, method="", status="parse_error").inc()
            logger.warning(f"Unparseable JSON-RPC frame: {e}")
            return rpc_error(None, {"code": int(ErrorCode.PARSE_ERROR), "message": f"Parse error: {e}"})
        return await self.handle(data)

    async def handle(self, data: Any) -> Optional[Dict[str, Any]]:
        """
        Handle one decoded JSON-RPC request.

        Args:
            data: Decoded JSON value

        Returns:
            The JSON-RPC response, or None for notifications
        """
        request_id = data.get("id") if isinstance(data, dict) else None
        try:
            request = JsonRpcRequest.from_dict(data)
        except ProtocolError as e:
            rpc_requests_total.labels(carrier=self.carrier, method="", status="invalid").inc()
            return rpc_error(request_id, to_rpc_error(e))

        status = "success"
        try:
            result = await self._route(request)
            response = rpc_result(request.id, result)
        except ToolError as e:
            status = "error"
            response = rpc_error(request.id, to_rpc_error(e))
        except Exception as e:
            status = "error"
            logger.error(
                f"Unhandled error in {request.method}",
                exc_info=True,
                extra={"method": request.method, "request_id": request.id},
            )
            response = rpc_error(request.id, to_rpc_error(e))
        finally:
            method_label = request.method if request.method in self._methods else "unknown"
            rpc_requests_total.labels(carrier=self.carrier, method=method_label, status=status).inc()

        if request.is_notification and not self.answer_notifications:
            return None
        return response

    async def _route(self, request: JsonRpcRequest) -> Any:
        method = self._methods.get(request.method)
        if method is None:
            if request.method.startswith("notifications/"):
                return None
            raise ProtocolError(f"Unknown method: {request.method}", ErrorCode.METHOD_NOT_FOUND)
        return await method(request.params)

    async def _initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
            "capabilities": {"tools": {}},
        }

    async def _list_tools(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"tools": self.registry.list_tools()}

    async def _invoke_tool(self, params: Dict[str, Any]) -> Dict[str, Any]:
        invocation = InvocationRequest.from_params(params)
        result = await self.registry.dispatch(invocation.name, invocation.arguments)
        return result.model_dump()

    async def _ping(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {}
