"""mcp-stdio entry point.

Runs the reference server over the stdio transport until stdin closes or
a shutdown signal (INT, TERM, QUIT by default) arrives.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from mcp_stdio import __version__
from mcp_stdio.config import LOG_LEVELS, ConfigError, TransportConfig, load_config
from mcp_stdio.logging_config import setup_logging
from mcp_stdio.server import EchoServer
from mcp_stdio.transports.stdio import StdioTransport


def main(argv: list[str] | None = None) -> int:
    """Run the stdio server.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(description="Line-delimited JSON-RPC over stdio")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to a transport configuration YAML file",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="Override the configured log level",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"mcp-stdio {__version__}",
    )

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config) if args.config else TransportConfig()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        level=args.log_level or config.log_level,
        log_file=config.log_file or None,
        json_format=config.log_json,
    )
    logger = logging.getLogger("mcp_stdio")

    server = EchoServer(logger=logger)
    transport = StdioTransport(
        server,
        skip_blank_lines=config.skip_blank_lines,
        shutdown_signals=config.shutdown_signals,
    )
    server.attach(transport)

    try:
        transport.start()
    finally:
        transport.signal_handler.clear()

    return 0


if __name__ == "__main__":
    sys.exit(main())
