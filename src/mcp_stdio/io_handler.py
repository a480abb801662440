"""Failure-isolating wrapper around the three standard streams.

Reads and writes never raise for stream-level failures (closed descriptor,
broken pipe, operations on a closed file). Failures are logged and reported
as end-of-stream for reads or as a FAILED result for writes.

When the input is backed by a file descriptor, reads wait on it together
with a wakeup pipe, so close() from another thread unblocks a pending read.
"""

from __future__ import annotations

import logging
import os
import selectors
import sys
import threading
from dataclasses import dataclass
from enum import Enum
from typing import IO, Any

log = logging.getLogger(__name__)

# ValueError covers "I/O operation on closed file"
STREAM_ERRORS = (OSError, ValueError)

READ_CHUNK_SIZE = 65536


class IOStatus(Enum):
    """Outcome of a single stream operation."""

    OK = "ok"
    EOF = "eof"
    FAILED = "failed"


@dataclass
class IOResult:
    """Tagged result of a stream operation."""

    status: IOStatus
    value: str | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        """Check if the operation succeeded."""
        return self.status == IOStatus.OK


class IOHandler:
    """Synchronous wrapper for input, output and error streams.

    All three streams are switched to immediate-flush mode on construction
    and every write is flushed.
    """

    def __init__(
        self,
        input: IO[str] | None = None,
        output: IO[str] | None = None,
        error: IO[str] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the handler.

        Args:
            input: Input stream (defaults to sys.stdin).
            output: Output stream (defaults to sys.stdout).
            error: Error stream (defaults to sys.stderr).
            logger: Logger for I/O failures (defaults to the module logger).
        """
        self.input = input if input is not None else sys.stdin
        self.output = output if output is not None else sys.stdout
        self.error = error if error is not None else sys.stderr
        self.logger = logger or log

        for stream in (self.input, self.output, self.error):
            _make_unbuffered(stream)

        self._closing = threading.Event()
        self._state_lock = threading.Lock()
        self._reading = False
        self._pending = b""
        self._wakeup: tuple[int, int] | None = None
        self._selector: selectors.BaseSelector | None = None
        self._input_fd = _selectable_fd(self.input)
        if self._input_fd is not None:
            self._open_wakeup()

    def read(self) -> IOResult:
        """Read one line from the input stream.

        Returns:
            IOResult carrying the line (with terminator), EOF, or the failure.
        """
        if self._selector is None:
            return self._read_stream()

        with self._state_lock:
            if self._closing.is_set():
                return IOResult(IOStatus.EOF)
            self._reading = True
        try:
            return self._read_fd()
        finally:
            with self._state_lock:
                self._reading = False
                if self._closing.is_set():
                    self._release_wakeup()

    def gets(self) -> str | None:
        """Read a line from the input stream.

        Returns:
            The line, or None at end of stream or after an I/O failure.
        """
        result = self.read()
        if result.status == IOStatus.FAILED:
            self._log_error(self.input, result.error)
        return result.value

    def write(self, message: str) -> IOResult:
        """Write a line to the output stream."""
        return self._io_write(self.output, message)

    def write_error(self, message: str) -> IOResult:
        """Write a line to the error stream."""
        return self._io_write(self.error, message)

    def close(self) -> None:
        """Close all streams. Already closed streams are skipped.

        A read blocked on the input descriptor returns end of stream.
        """
        with self._state_lock:
            self._closing.set()
            if self._wakeup is not None:
                if self._reading:
                    os.write(self._wakeup[1], b"\0")
                else:
                    self._release_wakeup()

        for stream in (self.input, self.output, self.error):
            if _stream_closed(stream):
                continue
            try:
                stream.close()
            except STREAM_ERRORS as e:
                self._log_error(stream, e)

    @property
    def closed(self) -> bool:
        """Check if all three streams are closed."""
        return all(_stream_closed(s) for s in (self.input, self.output, self.error))

    def _open_wakeup(self) -> None:
        selector = selectors.DefaultSelector()
        try:
            selector.register(self._input_fd, selectors.EVENT_READ)
        except (OSError, ValueError):
            # regular files and /dev/null cannot be polled; readline never blocks on them
            selector.close()
            return
        self._wakeup = os.pipe()
        selector.register(self._wakeup[0], selectors.EVENT_READ)
        self._selector = selector

    def _read_stream(self) -> IOResult:
        try:
            line = self.input.readline()
        except STREAM_ERRORS as e:
            return IOResult(IOStatus.FAILED, error=e)

        if not line:
            return IOResult(IOStatus.EOF)
        return IOResult(IOStatus.OK, value=line)

    def _read_fd(self) -> IOResult:
        assert self._selector is not None and self._wakeup is not None
        while b"\n" not in self._pending:
            try:
                events = self._selector.select()
            except STREAM_ERRORS as e:
                return IOResult(IOStatus.FAILED, error=e)

            if self._closing.is_set() or any(
                key.fd == self._wakeup[0] for key, _ in events
            ):
                return IOResult(IOStatus.EOF)

            try:
                chunk = os.read(self._input_fd, READ_CHUNK_SIZE)
            except OSError as e:
                # close() may have released the descriptor after select returned
                if self._closing.is_set():
                    return IOResult(IOStatus.EOF)
                return IOResult(IOStatus.FAILED, error=e)
            if not chunk:
                break
            self._pending += chunk

        if not self._pending:
            return IOResult(IOStatus.EOF)

        line, sep, self._pending = self._pending.partition(b"\n")
        encoding = getattr(self.input, "encoding", None) or "utf-8"
        return IOResult(IOStatus.OK, value=(line + sep).decode(encoding, errors="replace"))

    def _release_wakeup(self) -> None:
        # caller holds _state_lock
        if self._wakeup is None:
            return
        if self._selector is not None:
            self._selector.close()
        for fd in self._wakeup:
            os.close(fd)
        self._wakeup = None
        self._selector = None

    def _io_write(self, stream: IO[str], message: str) -> IOResult:
        try:
            stream.write(f"{message}\n")
            stream.flush()
        except STREAM_ERRORS as e:
            self._log_error(stream, e)
            return IOResult(IOStatus.FAILED, error=e)
        return IOResult(IOStatus.OK)

    def _log_error(self, stream: Any, exc: Exception | None) -> None:
        self.logger.error(
            "IO Error on %s: %s",
            type(stream).__name__,
            exc,
            exc_info=exc,
        )


def _make_unbuffered(stream: Any) -> None:
    """Switch a text stream to write-through mode where supported."""
    reconfigure = getattr(stream, "reconfigure", None)
    if reconfigure is None:
        return
    try:
        reconfigure(write_through=True, line_buffering=True)
    except (OSError, ValueError, TypeError):
        pass


def _selectable_fd(stream: Any) -> int | None:
    """Return the stream's descriptor if it can be waited on with selectors."""
    if os.name != "posix":
        return None
    try:
        fd = stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None
    return fd if isinstance(fd, int) and fd >= 0 else None


def _stream_closed(stream: Any) -> bool:
    try:
        return bool(stream.closed)
    except AttributeError:
        return False
