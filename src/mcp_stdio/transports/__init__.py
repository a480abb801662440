"""Transport implementations."""

from mcp_stdio.transports.base import DEFAULT_SHUTDOWN_SIGNALS, BaseTransport, RequestHandler
from mcp_stdio.transports.stdio import StdioTransport

__all__ = [
    "BaseTransport",
    "DEFAULT_SHUTDOWN_SIGNALS",
    "RequestHandler",
    "StdioTransport",
]
