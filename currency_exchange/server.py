"""MCP stdio entry point for the currency exchange tools."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import anyio
import anyio.to_thread
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from .config import Config
from .dispatcher import ToolDispatcher, ToolFailure

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class CurrencyExchangeServer:
    """Process-wide handle that owns the MCP server and its dispatcher.

    Creating the handle registers the tool catalog; :meth:`run` serves
    requests over stdio until the client disconnects or the process is
    interrupted.
    """

    def __init__(self, dispatcher: Optional[ToolDispatcher] = None) -> None:
        self.dispatcher = dispatcher or ToolDispatcher()
        self.server = Server(Config.SERVER_NAME, version=Config.SERVER_VERSION)
        self._register_handlers()

    def _register_handlers(self) -> None:
        self.server.list_tools()(self.list_tools)
        # Registered directly so McpError reaches the client as a JSON-RPC
        # error instead of being folded into an isError tool result.
        self.server.request_handlers[types.CallToolRequest] = self._handle_call_tool

    async def list_tools(self) -> List[types.Tool]:
        return [
            types.Tool(
                name=tool["name"],
                description=tool["description"],
                inputSchema=tool["inputSchema"],
            )
            for tool in self.dispatcher.list_tools()
        ]

    async def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> List[types.TextContent]:
        """Run a tool in a worker thread and render its payload as text."""

        outcome = await anyio.to_thread.run_sync(self.dispatcher.call, name, arguments)
        if isinstance(outcome, ToolFailure):
            raise McpError(types.ErrorData(code=outcome.kind.code, message=outcome.message))

        return [
            types.TextContent(
                type="text",
                text=json.dumps(outcome.payload, indent=2, ensure_ascii=False),
            )
        ]

    async def _handle_call_tool(self, req: types.CallToolRequest) -> types.ServerResult:
        content = await self.call_tool(req.params.name, req.params.arguments)
        return types.ServerResult(types.CallToolResult(content=content))

    async def run(self) -> None:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Currency Exchange MCP server running on stdio")
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="currency-exchange-server",
        description="Serve Sri Lankan exchange rate tools over MCP stdio.",
    )
    parser.add_argument(
        "--log-level",
        default=Config.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level (logs go to stderr)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(level=args.log_level, format=LOG_FORMAT, stream=sys.stderr)

    if not Config.validate():
        logger.error("Invalid configuration, refusing to start")
        return 1

    server = CurrencyExchangeServer()
    try:
        anyio.run(server.run)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
