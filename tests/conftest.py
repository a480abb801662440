"""Pytest configuration and fixtures for transport tests."""

from __future__ import annotations

import io
import logging
import signal

import pytest

from mcp_stdio.io_handler import IOHandler
from mcp_stdio.signal_handler import SignalHandler


class FakeSignalTable:
    """Stands in for signal.signal so tests never touch real dispositions."""

    def __init__(self) -> None:
        self.handlers: dict[int, object] = {}
        self.calls: list[tuple[int, object]] = []
        self.fail_install: set[int] = set()
        self.fail_reset = False

    def __call__(self, signum: int, handler: object) -> object:
        self.calls.append((signum, handler))
        if _is_trap(handler):
            if signum in self.fail_install:
                raise OSError(22, "Invalid argument")
        elif self.fail_reset:
            raise ValueError("test error")
        previous = self.handlers.get(signum, signal.SIG_DFL)
        self.handlers[signum] = handler
        return previous

    def installs(self, signum: int) -> int:
        """Count trap installations for a signal."""
        return sum(1 for s, h in self.calls if s == signum and _is_trap(h))


def _is_trap(handler: object) -> bool:
    return getattr(handler, "__name__", "") == "trap"


class RecordingStream(io.StringIO):
    """StringIO that keeps its contents after close()."""

    def __init__(self, initial_value: str = "") -> None:
        super().__init__(initial_value)
        self.captured = ""

    def close(self) -> None:
        if not self.closed:
            self.captured = self.getvalue()
        super().close()

    @property
    def text(self) -> str:
        return self.captured if self.closed else self.getvalue()


class RecordingServer:
    """Request handler that records every call."""

    def __init__(self, on_message=None) -> None:
        self.logger = logging.getLogger("tests.server")
        self.messages: list[str] = []
        self.headers: list[dict] = []
        self.on_message = on_message

    def handle_request(self, message, headers=None):
        self.messages.append(message)
        self.headers.append(headers)
        if self.on_message is not None:
            self.on_message(message)


@pytest.fixture(autouse=True)
def fake_signals(monkeypatch, request):
    """Replace signal.signal for every test.

    Tests in TestRealSignalDelivery are excluded so they can exercise
    actual OS delivery.
    """
    if "TestRealSignalDelivery" in str(request.node.nodeid):
        yield None
        return

    table = FakeSignalTable()
    monkeypatch.setattr(signal, "signal", table)
    yield table


@pytest.fixture
def logger() -> logging.Logger:
    """Return a test logger that propagates to caplog."""
    return logging.getLogger("tests.transport")


@pytest.fixture
def signal_handler(logger: logging.Logger):
    """Create a SignalHandler and clear it after the test."""
    handler = SignalHandler(logger=logger)
    yield handler
    handler.clear()


@pytest.fixture
def streams() -> tuple[RecordingStream, RecordingStream, RecordingStream]:
    """Create input, output and error streams."""
    return RecordingStream(), RecordingStream(), RecordingStream()


def make_io_handler(input_text: str, logger: logging.Logger) -> IOHandler:
    """Build an IOHandler over in-memory streams."""
    return IOHandler(
        input=RecordingStream(input_text),
        output=RecordingStream(),
        error=RecordingStream(),
        logger=logger,
    )
