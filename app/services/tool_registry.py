"""Tool registry and dispatcher."""

import logging
import time
from typing import Dict, Any, List, Optional

from app.models.tool import ToolDefinition, ToolResult
from app.infra.error_handler import (
    DuplicateToolError,
    InvalidArgumentsError,
    ToolError,
    UnknownToolError,
)
from app.infra.metrics import tool_calls_total, tool_call_duration

logger = logging.getLogger(__name__)


def _matches_type(value: Any, expected: str) -> bool:
    # bool is an int subclass; it only satisfies "boolean"
    if expected == "string":
        return isinstance(value, str)
    if expected == "boolean":
        return isinstance(value, bool)
    if expected == "integer":
        return isinstance(value, int) and not isinstance(value, bool)
    if expected == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return False


def validate_arguments(tool_def: ToolDefinition, raw_arguments: Any) -> Dict[str, Any]:
    """
    Validate raw arguments against a tool's declared parameters.

    Fails fast on the first violated constraint, in declaration order.
    Undeclared keys are dropped from the returned mapping.

    Args:
        tool_def: ToolDefinition whose parameters are checked
        raw_arguments: Argument mapping from the caller (None means empty)

    Returns:
        Dict holding only declared parameters

    Raises:
        InvalidArgumentsError: On the first violation found
    """
    if raw_arguments is None:
        raw_arguments = {}
    if not isinstance(raw_arguments, dict):
        raise InvalidArgumentsError(
            f"expected an object of arguments, got {type(raw_arguments).__name__}"
        )

    validated: Dict[str, Any] = {}
    for name, spec in tool_def.parameters.items():
        if name not in raw_arguments or raw_arguments[name] is None:
            if spec.required:
                raise InvalidArgumentsError(f"'{name}' is required", parameter=name)
            continue

        value = raw_arguments[name]
        if not _matches_type(value, spec.type):
            raise InvalidArgumentsError(
                f"'{name}' must be of type {spec.type}, got {type(value).__name__}",
                parameter=name,
            )
        if spec.min_length is not None and spec.type == "string" and len(value) < spec.min_length:
            raise InvalidArgumentsError(
                f"'{name}' must be at least {spec.min_length} character(s) long",
                parameter=name,
            )
        validated[name] = value

    ignored = sorted(set(raw_arguments) - set(tool_def.parameters))
    if ignored:
        logger.debug(f"Dropping undeclared arguments for {tool_def.name}: {ignored}")

    return validated


class ToolRegistry:
    """
    Catalog of tools and the dispatcher that runs them.

    The catalog is built once at startup and then only read; registration
    order is the listing order.
    """

    def __init__(self, tools: Optional[List[ToolDefinition]] = None):
        self._tools: Dict[str, ToolDefinition] = {}
        for tool_def in tools or []:
            self.register(tool_def)

    def register(self, tool_def: ToolDefinition) -> None:
        """
        Register a tool definition.

        Raises:
            DuplicateToolError: If the name is already registered
        """
        if tool_def.name in self._tools:
            raise DuplicateToolError(tool_def.name)
        self._tools[tool_def.name] = tool_def
        logger.debug(f"Registered tool: {tool_def.name}")

    def get(self, name: str) -> ToolDefinition:
        tool_def = self._tools.get(name)
        if tool_def is None:
            raise UnknownToolError(name)
        return tool_def

    def names(self) -> List[str]:
        return list(self._tools)

    def list_tools(self) -> List[Dict[str, Any]]:
        """Return the catalog for capability discovery, in registration order."""
        return [tool_def.get_schema() for tool_def in self._tools.values()]

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    async def dispatch(self, name: str, raw_arguments: Any = None) -> ToolResult:
        """
        Validate arguments and run a tool.

        Args:
            name: Registered tool name
            raw_arguments: Unvalidated argument mapping

        Returns:
            The handler's ToolResult

        Raises:
            UnknownToolError: If no tool has this name
            InvalidArgumentsError: If arguments violate the tool's parameters
            UpstreamError: If the handler's backend call fails
        """
        tool_def = self.get(name)
        arguments = validate_arguments(tool_def, raw_arguments)

        start_time = time.time()
        status = "success"
        try:
            return await tool_def.handler(arguments)
        except ToolError as e:
            status = "failure"
            logger.warning(
                f"Tool {name} failed: {e.message}",
                extra={"tool_name": name, "error_code": int(e.code)},
            )
            raise
        except Exception:
            status = "error"
            logger.error(f"Tool {name} raised unexpectedly", exc_info=True, extra={"tool_name": name})
            raise
        finally:
            duration = time.time() - start_time
            tool_calls_total.labels(tool_name=name, status=status).inc()
            tool_call_duration.labels(tool_name=name).observe(duration)
            logger.info(
                "Tool call completed",
                extra={"tool_name": name, "status": status, "duration_ms": int(duration * 1000)},
            )
