"""MCP stdio server with JSON-RPC framing.

Implements Model Context Protocol (MCP) for usage and quota reporting.
Each input line is dispatched as its own task, so responses may be written
out of order; clients correlate them by ``id``.
"""
import asyncio
import json
import logging
import sys
from typing import Any, Protocol, TextIO

from agent_usage_mcp.config import Settings
from agent_usage_mcp.errors import error_message
from agent_usage_mcp.mcp.tools import TOOL_REGISTRY, execute_tool, list_tools
from agent_usage_mcp.mcp.tracker import RequestTracker

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603
APPLICATION_ERROR = -32000


# MCP Protocol Implementation


async def handle_initialize(params: dict[str, Any]) -> dict[str, Any]:
    """Handle MCP initialize request."""
    settings = Settings()
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {
            "tools": {}
        },
        "serverInfo": {
            "name": settings.server_name,
            "version": settings.server_version
        }
    }


async def handle_tools_list(params: dict[str, Any]) -> dict[str, Any]:
    """List all available tools with their schemas."""
    return {"tools": list_tools()}


async def handle_tools_call(params: dict[str, Any]) -> dict[str, Any]:
    """Call a tool with given parameters."""
    tool_name = params.get("name")
    tool_params = params.get("arguments")
    if not isinstance(tool_params, dict):
        tool_params = {}

    result = await execute_tool(tool_name, tool_params)

    return {
        "content": [
            {
                "type": "text",
                "text": json.dumps(result, indent=2)
            }
        ]
    }


# JSON-RPC Handler


def make_response(req_id: Any, result: Any) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": req_id, "result": result}


def make_error(req_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": req_id, "error": {"code": code, "message": message}}


async def handle_request(request: Any) -> dict[str, Any] | None:
    """Handle a single JSON-RPC message.

    Returns:
        JSON-RPC response dictionary, or None for notifications (no ``id`` key)
    """
    if not isinstance(request, dict):
        return make_error(None, INVALID_REQUEST, "Invalid Request")

    is_notification = "id" not in request
    req_id = request.get("id")
    method = request.get("method")
    params = request.get("params")
    if not isinstance(params, dict):
        params = {}

    logger.debug(f"Dispatching {method} (id={req_id!r})")

    try:
        if method == "initialize":
            response = make_response(req_id, await handle_initialize(params))
        elif method == "ping":
            response = make_response(req_id, {})
        elif method == "tools/list":
            response = make_response(req_id, await handle_tools_list(params))
        elif method == "tools/call":
            try:
                response = make_response(req_id, await handle_tools_call(params))
            except Exception as e:
                # Tool failures, unknown tools included
                logger.info(f"Tool {params.get('name')!r} failed: {error_message(e)}")
                response = make_error(req_id, APPLICATION_ERROR, error_message(e))
        else:
            response = make_error(req_id, METHOD_NOT_FOUND, f"Method not found: {method}")

    except Exception as e:
        logger.error(f"Internal error handling {method}: {e}", exc_info=True)
        response = make_error(req_id, INTERNAL_ERROR, f"Internal error: {error_message(e)}")

    if is_notification:
        return None
    return response


# Stdio transport


class LineReader(Protocol):
    async def readline(self) -> bytes | str: ...


class StdinReader:
    """Reads stdin lines in a worker thread so the event loop stays free."""

    def __init__(self, stream: Any = None) -> None:
        self.stream = stream or sys.stdin.buffer

    async def readline(self) -> bytes:
        return await asyncio.to_thread(self.stream.readline)


def write_message(output: TextIO, message: dict[str, Any]) -> None:
    """Write one framed JSON-RPC message and flush."""
    output.write(json.dumps(message, separators=(",", ":"), ensure_ascii=False) + "\n")
    output.flush()


def _log_task_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Unhandled error in request task", exc_info=exc)


async def run_stdio_server(
    reader: LineReader | None = None,
    output: TextIO | None = None,
    tracker: RequestTracker | None = None,
) -> None:
    """Run MCP server over stdio with robust JSON-RPC framing.

    Reads JSON-RPC requests from ``reader`` (one per line) and writes
    responses to ``output`` (one per line). Returns once input has closed
    and every dispatched request has been answered.
    """
    reader = reader or StdinReader()
    output = output or sys.stdout
    tracker = tracker or RequestTracker()
    tasks: set[asyncio.Task] = set()

    async def dispatch(request: Any) -> None:
        try:
            response = await handle_request(request)
            if response is not None:
                write_message(output, response)
        finally:
            tracker.leave()

    while True:
        line = await reader.readline()
        if not line:
            # EOF - client closed its write side
            break

        if isinstance(line, bytes):
            line = line.decode("utf-8", errors="replace")
        line = line.strip()
        if not line:
            continue

        try:
            request = json.loads(line)
        except (ValueError, RecursionError) as e:
            logger.warning(f"Parse error: {e}")
            write_message(output, make_error(None, PARSE_ERROR, "Parse error"))
            continue

        tracker.enter()
        task = asyncio.create_task(dispatch(request))
        tasks.add(task)
        task.add_done_callback(tasks.discard)
        task.add_done_callback(_log_task_failure)

    logger.info(f"Input closed, waiting for {tracker.in_flight} in-flight request(s)")
    tracker.close_input()
    await tracker.wait_until_idle()


def _log_loop_exception(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    exc = context.get("exception")
    logger.error(f"Unhandled async error: {context.get('message')}", exc_info=exc)


async def serve() -> None:
    """Run the server on the real stdin/stdout."""
    asyncio.get_running_loop().set_exception_handler(_log_loop_exception)
    logger.info(f"Agent usage MCP server starting on stdio with tools: {', '.join(TOOL_REGISTRY)}")
    await run_stdio_server()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )


def main() -> None:
    """Entry point for MCP server."""
    configure_logging(Settings().log_level)
    try:
        asyncio.run(serve())
    except KeyboardInterrupt:
        logger.info("Server shutting down...")


if __name__ == "__main__":
    main()
