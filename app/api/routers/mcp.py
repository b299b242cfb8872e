"""MCP JSON-RPC over HTTP router."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()


@router.post("/mcp", tags=["MCP"])
async def mcp_endpoint(request: Request):
    """
    Handle one JSON-RPC 2.0 request.

    Always answers HTTP 200; failures are reported in the JSON-RPC
    ``error`` member.

    **Example Request:**
    ```json
    {
        "jsonrpc": "2.0",
        "id": 1,
        "method": "tools/invoke",
        "params": {"name": "vps_run_command", "arguments": {"cmd": "uptime"}}
    }
    ```
    """
    rpc_handler = request.app.state.rpc_handler
    body = await request.body()
    response = await rpc_handler.handle_raw(body)
    return JSONResponse(status_code=200, content=response)
