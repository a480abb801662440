"""JSON-RPC 2.0 envelopes for line-delimited transports.

Builders return plain dicts; encode() turns a message into the single-line
canonical form written by the transport.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Implementation-defined server error, used for unhandled handler failures
SERVER_ERROR = -32000

JSONRPC_VERSION = "2.0"


class JsonRpcError(Exception):
    """JSON-RPC error with code and message."""

    def __init__(self, code: int, message: str, data: Any | None = None) -> None:
        """Initialize the error.

        Args:
            code: JSON-RPC error code.
            message: Human-readable error message.
            data: Optional additional error data.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


@dataclass
class JsonRpcRequest:
    """Represents a JSON-RPC request (has id)."""

    id: int | str
    method: str
    params: dict[str, Any] | list[Any] | None = None


@dataclass
class JsonRpcNotification:
    """Represents a JSON-RPC notification (no id)."""

    method: str
    params: dict[str, Any] | list[Any] | None = None


def parse_message(raw: str) -> JsonRpcRequest | JsonRpcNotification:
    """Parse a JSON-RPC message from one line of text.

    Args:
        raw: Raw JSON string.

    Returns:
        Parsed request or notification.

    Raises:
        JsonRpcError: If the message is invalid.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise JsonRpcError(PARSE_ERROR, f"Parse error: {e}") from e

    if not isinstance(data, dict):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: message must be an object")

    if data.get("jsonrpc") != JSONRPC_VERSION:
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: jsonrpc must be '2.0'")

    method = data.get("method")
    if not isinstance(method, str):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: method must be a string")

    params = data.get("params")
    if params is not None and not isinstance(params, dict | list):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: params must be structured")

    if "id" not in data:
        return JsonRpcNotification(method=method, params=params)

    msg_id = data["id"]
    if isinstance(msg_id, bool) or not isinstance(msg_id, int | str):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: id must be integer or string")
    return JsonRpcRequest(id=msg_id, method=method, params=params)


def make_response(msg_id: int | str, result: Any) -> dict[str, Any]:
    """Build a successful JSON-RPC response."""
    return {"jsonrpc": JSONRPC_VERSION, "id": msg_id, "result": result}


def make_error(
    msg_id: int | str | None,
    code: int,
    message: str,
    data: Any | None = None,
) -> dict[str, Any]:
    """Build a JSON-RPC error response.

    Args:
        msg_id: Request ID (or None when it is unknown).
        code: Error code.
        message: Error message.
        data: Optional error data.

    Returns:
        Error envelope with keys in jsonrpc, error, id order.
    """
    error_obj: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error_obj["data"] = data

    return {"jsonrpc": JSONRPC_VERSION, "error": error_obj, "id": msg_id}


def make_notification(
    method: str, params: dict[str, Any] | list[Any] | None = None
) -> dict[str, Any]:
    """Build a JSON-RPC notification (server to client)."""
    notification: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "method": method}
    if params is not None:
        notification["params"] = params
    return notification


def encode(message: Any) -> str:
    """Serialize a message to one line of compact JSON.

    Strings are assumed to be serialized already and are returned unchanged.
    """
    if isinstance(message, str):
        return message
    return json.dumps(message, separators=(",", ":"))
