"""Error taxonomy for tool dispatch and JSON-RPC error rendering."""

from typing import Optional, Dict, Any
from enum import Enum, IntEnum


class ErrorCategory(str, Enum):
    """Categories of errors for better handling."""
    CALLER = "caller"  # Bad tool name or arguments
    DEPENDENCY = "dependency"  # Backend transport/HTTP/application failure
    REGISTRATION = "registration"  # Catalog construction errors
    PROTOCOL = "protocol"  # Malformed JSON-RPC frames
    INTERNAL = "internal"  # Unexpected failures


class ErrorCode(IntEnum):
    """JSON-RPC error codes returned to callers."""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    UPSTREAM_ERROR = -32000
    UNKNOWN_TOOL = -32002


class ToolError(Exception):
    """Base exception for errors surfaced to protocol callers."""
    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnknownToolError(ToolError):
    """The requested tool is not registered."""
    code = ErrorCode.UNKNOWN_TOOL
    category = ErrorCategory.CALLER

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class InvalidArgumentsError(ToolError):
    """Tool arguments violate the declared parameter schema."""
    code = ErrorCode.INVALID_PARAMS
    category = ErrorCategory.CALLER

    def __init__(self, message: str, parameter: Optional[str] = None):
        self.parameter = parameter
        super().__init__(f"Invalid arguments: {message}")


class UpstreamError(ToolError):
    """The backend failed at the transport, HTTP or application layer."""
    code = ErrorCode.UPSTREAM_ERROR
    category = ErrorCategory.DEPENDENCY

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class DuplicateToolError(ToolError):
    """A tool with the same name is already registered."""
    category = ErrorCategory.REGISTRATION

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tool already registered: {name}")


class ProtocolError(ToolError):
    """Malformed or unroutable JSON-RPC request."""
    category = ErrorCategory.PROTOCOL

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_REQUEST):
        self.code = code
        super().__init__(message)


class ConfigurationError(Exception):
    """Fatal startup configuration error."""


def to_rpc_error(error: Exception) -> Dict[str, Any]:
    """
    Render an exception as a JSON-RPC error object.

    Args:
        error: The exception to render

    Returns:
        Dict with integer ``code`` and ``message``
    """
    if isinstance(error, ToolError):
        return {"code": int(error.code), "message": error.message}
    return {"code": int(ErrorCode.INTERNAL_ERROR), "message": f"Internal error: {error}"}
