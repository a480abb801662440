"""Transport interface.

Defines the operations every transport must implement and the shared
message hand-off to the request handler.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from mcp_stdio.signal_handler import SignalHandler

log = logging.getLogger(__name__)

DEFAULT_SHUTDOWN_SIGNALS = ("INT", "TERM", "QUIT")


class RequestHandler(Protocol):
    """Consumes decoded messages; replies go through the transport."""

    def handle_request(self, message: str, headers: Mapping[str, str] | None = None) -> Any: ...


class BaseTransport(ABC):
    """Abstract base class for all transports.

    On construction the transport registers stop() for the shutdown
    signals with its signal handler.
    """

    def __init__(
        self,
        server: RequestHandler,
        logger: logging.Logger | None = None,
        signal_handler: SignalHandler | None = None,
        shutdown_signals: Iterable[str] = DEFAULT_SHUTDOWN_SIGNALS,
    ) -> None:
        """Initialize the transport.

        Args:
            server: Request handler receiving every inbound message.
            logger: Logger (defaults to the server's logger, if any).
            signal_handler: Signal handler to register shutdown callbacks with.
            shutdown_signals: Signal names that stop the transport.
        """
        self.server = server
        self.logger = logger or getattr(server, "logger", None) or log
        self.signal_handler = signal_handler or SignalHandler(logger=self.logger)
        self._setup_signal_handlers(tuple(shutdown_signals))

    @abstractmethod
    def start(self) -> None:
        """Start the transport."""
        raise NotImplementedError(f"{type(self).__name__} must implement start")

    @abstractmethod
    def stop(self) -> None:
        """Stop the transport."""
        raise NotImplementedError(f"{type(self).__name__} must implement stop")

    @abstractmethod
    def send_message(self, message: Any) -> None:
        """Send a message to the client."""
        raise NotImplementedError(f"{type(self).__name__} must implement send_message")

    def process_message(self, message: str, headers: Mapping[str, str] | None = None) -> None:
        """Hand an incoming message to the request handler.

        Args:
            message: Raw message text.
            headers: Transport-level headers (empty for stdio).
        """
        self.server.handle_request(message, headers=dict(headers or {}))

    def _setup_signal_handlers(self, signals: tuple[str, ...]) -> None:
        if signals:
            self.signal_handler.register(*signals, callback=self.stop)
