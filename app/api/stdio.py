"""
JSON-RPC over stdin/stdout.

One JSON-RPC message per line in each direction. Each inbound line is
handled in its own task so backend calls overlap; a single writer emits
responses in the order the requests arrived.

Logging must never go to stdout here: it would corrupt the protocol stream.
"""

import asyncio
import json
import logging
import sys
from typing import Any, Dict, Optional, TextIO

from app.api.rpc import RpcHandler
from app.infra.error_handler import ErrorCode
from app.models.rpc import rpc_error
from app.services.tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

MAX_FRAME_SIZE = 16 * 1024 * 1024  # 16MB per line


async def _frame_error(message: str) -> Dict[str, Any]:
    return rpc_error(None, {"code": int(ErrorCode.INVALID_REQUEST), "message": message})


class StdioServer:
    """Line-delimited JSON-RPC server over an asyncio reader and a text writer."""

    def __init__(self, rpc_handler: RpcHandler, reader: asyncio.StreamReader, writer: TextIO):
        self.rpc_handler = rpc_handler
        self.reader = reader
        self.writer = writer
        self._output_closed = False

    async def serve(self) -> None:
        """
        Read requests until EOF, then wait for outstanding responses.

        Returns once every accepted request has been answered (or its
        write-back skipped because the output went away).
        """
        pending: "asyncio.Queue[Optional[asyncio.Task]]" = asyncio.Queue()
        writer_task = asyncio.create_task(self._write_responses(pending))

        try:
            while True:
                try:
                    line = await self.reader.readline()
                except ValueError as e:
                    # Over-long line; the reader has discarded it
                    logger.warning(f"Dropping oversized frame: {e}")
                    await pending.put(asyncio.create_task(
                        _frame_error(f"Frame exceeds {MAX_FRAME_SIZE} bytes")
                    ))
                    continue

                if not line:
                    break
                line = line.strip()
                if not line:
                    continue

                await pending.put(asyncio.create_task(self.rpc_handler.handle_raw(line)))
        finally:
            await pending.put(None)
            await writer_task

        logger.info("Stdio input closed, server stopping")

    async def _write_responses(self, pending: "asyncio.Queue[Optional[asyncio.Task]]") -> None:
        while True:
            task = await pending.get()
            if task is None:
                return
            response = await task
            if response is None:
                continue
            self._write_frame(response)

    def _write_frame(self, response: Dict[str, Any]) -> None:
        if self._output_closed:
            logger.debug("Output closed, skipping response", extra={"request_id": response.get("id")})
            return
        try:
            self.writer.write(json.dumps(response) + "\n")
            self.writer.flush()
        except (BrokenPipeError, ConnectionResetError, ValueError) as e:
            self._output_closed = True
            logger.warning(f"Output closed, skipping response write-back: {e}")


async def open_stdin_reader(limit: int = MAX_FRAME_SIZE) -> asyncio.StreamReader:
    """Wrap the process stdin in an asyncio StreamReader."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader(limit=limit)
    await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), sys.stdin)
    return reader


async def serve_stdio(registry: ToolRegistry) -> None:
    """Serve the registry over the process's stdin/stdout until stdin closes."""
    logger.info(
        f"Stdio server starting with {len(registry)} tools: {registry.names()}"
    )
    reader = await open_stdin_reader()
    server = StdioServer(RpcHandler(registry, carrier="stdio"), reader, sys.stdout)
    await server.serve()
