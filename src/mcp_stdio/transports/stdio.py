"""STDIO transport.

Reads newline-delimited JSON-RPC messages from stdin and writes responses
to stdout. Logging never goes to stdout so the protocol stream stays clean.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Any

from mcp_stdio.io_handler import IOHandler
from mcp_stdio.protocol.jsonrpc import SERVER_ERROR, encode, make_error
from mcp_stdio.signal_handler import SignalHandler
from mcp_stdio.transports.base import DEFAULT_SHUTDOWN_SIGNALS, BaseTransport, RequestHandler


class StdioTransport(BaseTransport):
    """Transport over standard input/output.

    The running flag and every write to the output stream share one lock,
    so stop() can never race a send into a closed stream.
    """

    def __init__(
        self,
        server: RequestHandler,
        logger: logging.Logger | None = None,
        signal_handler: SignalHandler | None = None,
        io_handler: IOHandler | None = None,
        skip_blank_lines: bool = False,
        shutdown_signals: Iterable[str] = DEFAULT_SHUTDOWN_SIGNALS,
    ) -> None:
        """Initialize the transport.

        Args:
            server: Request handler receiving every inbound line.
            logger: Logger (defaults to the server's logger, if any).
            signal_handler: Signal handler for shutdown signals.
            io_handler: Stream wrapper (defaults to the process streams).
            skip_blank_lines: Do not forward lines that are empty after stripping.
            shutdown_signals: Signal names that stop the transport.
        """
        self._running = False
        self._lock = threading.Lock()
        super().__init__(
            server,
            logger=logger,
            signal_handler=signal_handler,
            shutdown_signals=shutdown_signals,
        )
        self.io_handler = io_handler or IOHandler(logger=self.logger)
        self.skip_blank_lines = skip_blank_lines

    @property
    def running(self) -> bool:
        """Check if the transport is running."""
        with self._lock:
            return self._running

    def start(self) -> None:
        """Run the read loop until end of input or stop()."""
        self.logger.info("Starting STDIO transport")
        with self._lock:
            self._running = True

        while self.running:
            line = self.io_handler.gets()
            if line is None or not self.running:
                break

            message = line.strip()
            if not message and self.skip_blank_lines:
                continue

            try:
                self.process_message(message)
            except Exception as e:
                self.logger.error("Error processing message: %s", e, exc_info=True)
                self._send_error(SERVER_ERROR, f"Internal error: {e}")

        if self.running:
            self.logger.debug("Input stream ended")
            self.stop()

    def stop(self) -> None:
        """Stop the transport and close the streams."""
        self.logger.info("Stopping STDIO transport")
        with self._lock:
            self._running = False
        self.io_handler.close()

    def send_message(self, message: Any) -> None:
        """Write one message as a single line.

        Messages sent while the transport is not running are dropped.

        Args:
            message: Pre-serialized JSON string or a JSON-serializable value.
        """
        with self._lock:
            if not self._running:
                return
            self.io_handler.write(encode(message))

    def _send_error(self, code: int, message: str, msg_id: int | str | None = None) -> None:
        self.send_message(make_error(msg_id, code, message))
