"""JSON-RPC protocol helpers."""

from mcp_stdio.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    SERVER_ERROR,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    encode,
    make_error,
    make_notification,
    make_response,
    parse_message,
)

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcRequest",
    "METHOD_NOT_FOUND",
    "PARSE_ERROR",
    "SERVER_ERROR",
    "encode",
    "make_error",
    "make_notification",
    "make_response",
    "parse_message",
]
