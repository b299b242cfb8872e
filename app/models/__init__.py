from .tool import ParameterSpec, ContentBlock, ToolResult, ToolDefinition
from .rpc import JsonRpcRequest, InvocationRequest, rpc_result, rpc_error

__all__ = [
    "ParameterSpec",
    "ContentBlock",
    "ToolResult",
    "ToolDefinition",
    "JsonRpcRequest",
    "InvocationRequest",
    "rpc_result",
    "rpc_error",
]
