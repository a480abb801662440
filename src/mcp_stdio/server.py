"""Reference request handler.

A small JSON-RPC server that answers initialize, ping and echo so the
stdio transport can be run end to end.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from mcp_stdio.protocol.jsonrpc import (
    METHOD_NOT_FOUND,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    make_error,
    make_response,
    parse_message,
)
from mcp_stdio.transports.base import BaseTransport

SERVER_INFO = {"name": "mcp-stdio", "version": "1.0.0"}


class EchoServer:
    """Request handler that replies through the attached transport.

    Supports:
    - initialize: returns server info
    - ping: returns an empty result
    - echo: returns its params unchanged
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """Initialize the server.

        Args:
            logger: Logger shared with the transport.
        """
        self.logger = logger or logging.getLogger(__name__)
        self._transport: BaseTransport | None = None
        self.client_info: dict[str, Any] | None = None

    def attach(self, transport: BaseTransport) -> None:
        """Set the transport used for replies."""
        self._transport = transport

    def handle_request(self, message: str, headers: Mapping[str, str] | None = None) -> None:
        """Handle one inbound message.

        Args:
            message: Raw JSON-RPC message string.
            headers: Transport headers (unused by stdio).
        """
        try:
            parsed = parse_message(message)
        except JsonRpcError as e:
            self.logger.warning("Rejected message: %s", e)
            self._reply(make_error(None, e.code, str(e)))
            return

        if isinstance(parsed, JsonRpcNotification):
            self.logger.debug("Notification %s ignored", parsed.method)
            return

        self._reply(self._dispatch(parsed))

    def _dispatch(self, request: JsonRpcRequest) -> dict[str, Any]:
        params = request.params if request.params is not None else {}

        if request.method == "initialize":
            if isinstance(params, dict):
                self.client_info = params.get("clientInfo")
            return make_response(
                request.id,
                {"serverInfo": SERVER_INFO, "capabilities": {}},
            )

        if request.method == "ping":
            return make_response(request.id, {})

        if request.method == "echo":
            return make_response(request.id, params)

        return make_error(request.id, METHOD_NOT_FOUND, f"Unknown method: {request.method}")

    def _reply(self, response: dict[str, Any]) -> None:
        if self._transport is None:
            self.logger.warning("No transport attached, dropping response")
            return
        self._transport.send_message(response)
