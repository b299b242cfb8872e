"""VPS tool catalog: handlers that proxy to the VPS API and render results."""

from functools import partial
from typing import Dict, Any, List

from app.adapters.vps_client import UpstreamProxy
from app.models.tool import ParameterSpec, ToolDefinition, ToolResult
from app.services.tool_registry import ToolRegistry

EMPTY_MARKER = "[empty]"


def _or_empty(value: Any) -> str:
    return str(value) if value else EMPTY_MARKER


def _render_streams(payload: Dict[str, Any]) -> str:
    """STDOUT/STDERR trailer shared by every tool result."""
    return (
        f"STDOUT:\n{_or_empty(payload.get('stdout'))}\n\n"
        f"STDERR:\n{_or_empty(payload.get('stderr'))}"
    )


def _render_listing(files: Any) -> str:
    lines = []
    for entry in files or []:
        if not isinstance(entry, dict):
            continue
        marker = "[DIR]" if entry.get("type") == "dir" else "     "
        lines.append(f"{marker}  {entry.get('name', '')}")
    return "\n".join(lines) or EMPTY_MARKER


async def run_command(proxy: UpstreamProxy, args: Dict[str, Any]) -> ToolResult:
    cmd = args["cmd"]
    r = await proxy.call("/run", {"cmd": cmd})
    return ToolResult.from_text(f"CMD: {cmd}\n\n{_render_streams(r)}")


async def list_dir(proxy: UpstreamProxy, args: Dict[str, Any]) -> ToolResult:
    path = args["path"]
    r = await proxy.call("/ls", {"path": path})
    return ToolResult.from_text(
        f"Listing: {path}\n\n{_render_listing(r.get('files'))}\n\n{_render_streams(r)}"
    )


async def read_file(proxy: UpstreamProxy, args: Dict[str, Any]) -> ToolResult:
    path = args["path"]
    r = await proxy.call("/read", {"path": path})
    content = r.get("content") or ""
    return ToolResult.from_text(f"File: {path}\n\n{content}\n\n{_render_streams(r)}")


async def write_file(proxy: UpstreamProxy, args: Dict[str, Any]) -> ToolResult:
    path = args["path"]
    # The proxy raises on success=false, so reaching here means the write landed
    r = await proxy.call("/write", {"path": path, "content": args["content"]})
    return ToolResult.from_text(f"Write: {path}\nStatus: success\n\n{_render_streams(r)}")


def build_tools(proxy: UpstreamProxy) -> List[ToolDefinition]:
    """Build the four VPS tool definitions bound to one backend proxy."""
    non_empty = dict(type="string", required=True, min_length=1)
    return [
        ToolDefinition(
            name="vps_run_command",
            description="Run shell command via VPS API",
            parameters={
                "cmd": ParameterSpec(**non_empty, description="Shell command to run"),
            },
            handler=partial(run_command, proxy),
        ),
        ToolDefinition(
            name="vps_list_dir",
            description="List directory via VPS API",
            parameters={
                "path": ParameterSpec(**non_empty, description="Directory path on the VPS"),
            },
            handler=partial(list_dir, proxy),
        ),
        ToolDefinition(
            name="vps_read_file",
            description="Read file via VPS",
            parameters={
                "path": ParameterSpec(**non_empty, description="File path on the VPS"),
            },
            handler=partial(read_file, proxy),
        ),
        ToolDefinition(
            name="vps_write_file",
            description="Write file via VPS",
            parameters={
                "path": ParameterSpec(**non_empty, description="File path on the VPS"),
                "content": ParameterSpec(type="string", required=True, description="Content to write"),
            },
            handler=partial(write_file, proxy),
        ),
    ]


def build_registry(proxy: UpstreamProxy) -> ToolRegistry:
    """Build a registry holding the fixed VPS tool catalog."""
    return ToolRegistry(build_tools(proxy))
