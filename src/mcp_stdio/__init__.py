"""Line-delimited JSON-RPC transport over standard input/output."""

from mcp_stdio.io_handler import IOHandler, IOResult, IOStatus
from mcp_stdio.signal_handler import SignalHandler
from mcp_stdio.transports import BaseTransport, StdioTransport

__version__ = "1.0.0"

__all__ = [
    "BaseTransport",
    "IOHandler",
    "IOResult",
    "IOStatus",
    "SignalHandler",
    "StdioTransport",
    "__version__",
]
