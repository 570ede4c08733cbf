#!/usr/bin/env python3
"""
Think MCP Server - structured reasoning prompts over stdio

This is a Model Context Protocol (MCP) style server for editors such as Cursor.
It reads newline-delimited JSON-RPC requests from stdin and answers each
"mcp/execute" call of the "think" tool with the user's prompt wrapped in
<thinking> markers and reasoning directives. No inference happens here; the
server only formats text.

Protocol:
- On startup a single "mcp/server_info" record announces the available tools
- Every request with a recoverable id gets exactly one response line on stdout
- Methods other than "mcp/execute" are ignored (other tools share the channel)
- Diagnostics go to stderr, and to a log file when CLAUDE_THINK_DEBUG=true

Usage:
- python -m think_mcp
- think-mcp --version

Version: 1.0.0
"""

# Standard libraries
import asyncio
import json
import logging
import signal
import sys
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, TextIO, Tuple

from think_mcp.formatter import format_thinking_prompt, preview
from think_mcp.log_setup import configure_logging, flush_logging
from think_mcp.mcp_tools import build_server_info
from think_mcp.protocol import (
    EXECUTE_METHOD,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    DecodeFailure,
    McpRequest,
    ProtocolError,
    decode_request,
    make_error,
    make_result,
    parse_execute_params,
    parse_think_arguments,
)
from think_mcp.settings import ServerSettings

logger = logging.getLogger(__name__)

# ============================================================================
# CONFIGURATION & CONSTANTS
# ============================================================================

# Upper bound for a single request line; longer lines are dropped
MAX_LINE_BYTES = 16 * 1024 * 1024

SHUTDOWN_SIGNALS = ("SIGINT", "SIGTERM")

# ============================================================================
# FRAMING
# ============================================================================

async def iter_lines(reader: asyncio.StreamReader) -> AsyncIterator[str]:
    """Yield non-blank, stripped lines until the stream closes."""
    while True:
        try:
            raw = await reader.readline()
        except ValueError as e:
            logger.error(f"Dropping over-long input line: {e}")
            continue
        except OSError as e:
            logger.error(f"Input stream error: {e}")
            return

        if not raw:
            return

        line = raw.decode("utf-8", errors="replace").strip()
        if not line:
            continue
        yield line


# ============================================================================
# MCP SERVER CLASS
# ============================================================================

class ThinkServer:
    def __init__(self, settings: ServerSettings, output: Optional[TextIO] = None):
        self.settings = settings
        self.output = output if output is not None else sys.stdout
        self.tools: Dict[str, Callable[[Any], str]] = {
            "think": self.run_think,
        }
        self._announced = False
        self._shutting_down = False
        self._reader: Optional[asyncio.StreamReader] = None
        self._transport: Optional[asyncio.BaseTransport] = None

    @property
    def shutting_down(self) -> bool:
        return self._shutting_down

    def attach_transport(self, transport: Optional[asyncio.BaseTransport]) -> None:
        """Remember the stdin transport so shutdown can close it."""
        self._transport = transport

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def send(self, message: Dict[str, Any]) -> None:
        """Write one record as a single JSON line."""
        print(json.dumps(message, separators=(",", ":")), file=self.output, flush=True)

    def announce(self) -> None:
        """Send the server_info record; only the first call writes anything."""
        if self._announced:
            return
        self._announced = True
        logger.info(f"{self.settings.server_name} starting (version {self.settings.version})")
        self.send(build_server_info(self.settings))

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def handle_line(self, line: str) -> Optional[Dict[str, Any]]:
        """Turn one framed line into a response record, or None for no reply."""
        logger.debug(f"Received request: {line}")

        request = decode_request(line)
        if isinstance(request, DecodeFailure):
            logger.error(f"Error processing request: {request.reason}")
            logger.error(f"Problematic line: {line[:200]}")
            if request.recovered_id is None:
                return None
            return make_error(request.recovered_id, PARSE_ERROR, "Parse error")

        if request.method != EXECUTE_METHOD:
            logger.info(f"Unknown method: {request.method}")
            return None

        try:
            output = self.handle_execute(request)
        except ProtocolError as e:
            logger.info(f"Sending error response: {e.message} (id: {request.id})")
            return make_error(request.id, e.code, e.message)

        return make_result(request.id, output)

    def handle_execute(self, request: McpRequest) -> str:
        """Run the requested tool; raises ProtocolError on invalid input."""
        params = parse_execute_params(request.params)

        handler = self.tools.get(params.tool) if isinstance(params.tool, str) else None
        if handler is None:
            logger.warning(f"Unknown tool requested: {params.tool}")
            raise ProtocolError(METHOD_NOT_FOUND, f'Tool "{params.tool}" not found')

        return handler(params.arguments)

    def run_think(self, arguments: Any) -> str:
        prompt = parse_think_arguments(arguments)
        logger.info(f"Processing 'think' request for prompt: {preview(prompt)}")
        return format_thinking_prompt(prompt)

    def process_line(self, line: str) -> None:
        response = self.handle_line(line)
        if response is None:
            return
        self.send(response)
        logger.debug(f"Response sent: {json.dumps(response)[:200]}")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def serve(self, reader: asyncio.StreamReader) -> None:
        """Announce, then handle lines one at a time until shutdown."""
        self._reader = reader
        self.announce()

        lines = iter_lines(reader)
        try:
            async for line in lines:
                if self._shutting_down:
                    break
                try:
                    self.process_line(line)
                except Exception:
                    logger.exception("Uncaught exception while handling a request")
                    self.shutdown("internal error")
                    break
        finally:
            await lines.aclose()

        self.shutdown("end of input")

    def shutdown(self, reason: str = "requested") -> None:
        """Stop accepting input and flush logs. Safe to call more than once."""
        if self._shutting_down:
            return
        self._shutting_down = True
        logger.info(f"MCP server shutting down ({reason})")

        if self._transport is not None:
            # connection_lost feeds EOF to the reader once the loop runs again
            self._transport.close()
        elif self._reader is not None and not self._reader.at_eof():
            self._reader.feed_eof()

        flush_logging()


# ============================================================================
# STDIO MODE
# ============================================================================

async def open_stdin_reader(stdin: TextIO) -> Tuple[asyncio.StreamReader, Optional[asyncio.BaseTransport]]:
    """Wrap stdin in a StreamReader driven by the event loop."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader(limit=MAX_LINE_BYTES)
    protocol = asyncio.StreamReaderProtocol(reader)
    try:
        transport, _ = await loop.connect_read_pipe(lambda: protocol, stdin)
    except ValueError:
        # Regular files (stdin redirected from disk) can't be watched by the
        # loop, but they never block either, so read them in one go
        logger.debug("stdin is not a pipe, reading it directly")
        reader.feed_data(stdin.buffer.read())
        reader.feed_eof()
        return reader, None
    return reader, transport


def install_signal_handlers(loop: asyncio.AbstractEventLoop, server: ThinkServer) -> List[int]:
    """Route SIGINT/SIGTERM to server.shutdown where the loop supports it."""
    installed = []
    for name in SHUTDOWN_SIGNALS:
        signum = getattr(signal, name, None)
        if signum is None:
            continue
        try:
            loop.add_signal_handler(signum, server.shutdown, name)
        except (NotImplementedError, RuntimeError):
            # Windows event loops; SIGINT still arrives as KeyboardInterrupt
            continue
        installed.append(signum)
    return installed


async def stdio_main(server: ThinkServer, stdin: Optional[TextIO] = None) -> None:
    """Main loop for stdio transport."""
    loop = asyncio.get_running_loop()
    reader, transport = await open_stdin_reader(stdin if stdin is not None else sys.stdin)
    server.attach_transport(transport)
    installed = install_signal_handlers(loop, server)
    try:
        await server.serve(reader)
    finally:
        for signum in installed:
            loop.remove_signal_handler(signum)


# ============================================================================
# MAIN APPLICATION
# ============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    settings = ServerSettings.from_env()

    if "--version" in argv:
        print(f"{settings.server_name} {settings.version}")
        return 0

    configure_logging(settings)
    server = ThinkServer(settings)
    try:
        asyncio.run(stdio_main(server))
    except KeyboardInterrupt:
        server.shutdown("keyboard interrupt")
    return 0


if __name__ == "__main__":
    sys.exit(main())
