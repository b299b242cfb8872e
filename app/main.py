"""VPS MCP gateway: FastAPI application and process entry point."""

import argparse
import asyncio
import sys
import uuid
from contextlib import asynccontextmanager
from typing import Optional, List

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.adapters.vps_client import UpstreamProxy
from app.api.rpc import RpcHandler, SERVER_VERSION
from app.infra.config import config
from app.infra.error_handler import ConfigurationError
from app.infra.logging import app_logger
from app.infra.middleware import (
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    RequestSizeLimitMiddleware,
)
from app.services.tool_registry import ToolRegistry
from app.services.vps_tools import build_registry

TRANSPORTS = ("http", "stdio")


def build_default_registry() -> ToolRegistry:
    """
    Build the VPS tool registry from configuration.

    Raises:
        ConfigurationError: If VPS_API_BASE is not set
    """
    proxy = UpstreamProxy(config.require_backend_url(), timeout=config.VPS_API_TIMEOUT)
    return build_registry(proxy)


def create_app(registry: ToolRegistry) -> FastAPI:
    """Create the HTTP carrier application around a tool registry."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app_logger.info(
            "Application starting up",
            extra={"tools": registry.names()},
        )
        yield
        app_logger.info("Application shutting down")

    app = FastAPI(
        title="VPS MCP Server",
        description="""
    Exposes remote-execution tools on a VPS through JSON-RPC 2.0 (MCP style).

    ## Methods

    - **initialize**: server identity and capabilities
    - **tools/list**: tool catalog with parameter schemas
    - **tools/invoke**: run a tool against the VPS API
    """,
        version=SERVER_VERSION,
        lifespan=lifespan,
    )
    app.state.registry = registry
    app.state.rpc_handler = RpcHandler(registry, carrier="http", answer_notifications=True)

    app.add_middleware(RequestSizeLimitMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    from app.api.routers import health, mcp

    app.include_router(mcp.router)
    app.include_router(health.router)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions."""
        error_id = str(uuid.uuid4())
        app_logger.error(f"Unhandled exception: {exc}", exc_info=True, extra={"error_id": error_id})
        return JSONResponse(
            status_code=500,
            content={"detail": f"Internal server error. Error ID: {error_id}"},
        )

    return app


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="VPS MCP server")
    parser.add_argument(
        "--transport",
        choices=TRANSPORTS,
        default=config.MCP_TRANSPORT if config.MCP_TRANSPORT in TRANSPORTS else "http",
        help="Carrier to serve on (default: MCP_TRANSPORT or http)",
    )
    parser.add_argument("--host", default=config.HOST, help="HTTP listen host")
    parser.add_argument("--port", type=int, default=config.PORT, help="HTTP listen port")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    try:
        registry = build_default_registry()
    except ConfigurationError as e:
        app_logger.critical(f"Startup aborted: {e}")
        sys.exit(1)

    if args.transport == "stdio":
        from app.api.stdio import serve_stdio

        asyncio.run(serve_stdio(registry))
        return

    import uvicorn

    app_logger.info(f"MCP HTTP server running on port {args.port} at /mcp")
    uvicorn.run(
        create_app(registry),
        host=args.host,
        port=args.port,
        log_level="debug" if config.DEBUG else "info",
        timeout_keep_alive=30,
        timeout_graceful_shutdown=30,
    )


if __name__ == "__main__":
    main()
