"""Signal trapping for graceful shutdown.

OS-level traps only enqueue the signal name. A daemon dispatcher thread
drains the queue and runs the registered callbacks, so user code never runs
on the signal-delivery context.
"""

from __future__ import annotations

import logging
import queue
import signal
import threading
from collections.abc import Callable
from typing import Any

log = logging.getLogger(__name__)

Callback = Callable[[], Any]

# Pushed onto the queue to stop the dispatcher thread
_STOP = object()


def resolve_signal(name: str) -> signal.Signals:
    """Resolve a signal name such as "INT" or "SIGTERM".

    Args:
        name: Signal name, with or without the SIG prefix.

    Returns:
        The matching signal.

    Raises:
        ValueError: If the name is unknown on this platform.
    """
    normalized = name.upper()
    if normalized.startswith("SIG"):
        normalized = normalized[3:]
    try:
        return signal.Signals[f"SIG{normalized}"]
    except KeyError:
        raise ValueError(f"unsupported signal name '{name}'") from None


class SignalHandler:
    """Maps signal names to ordered lists of callbacks."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """Initialize the handler.

        Args:
            logger: Logger for trap and callback events.
        """
        self.logger = logger or log
        self._callbacks: dict[str, list[Callback]] = {}
        # signal name -> disposition in place before our trap
        self._trapped: dict[str, Any] = {}
        self._lock = threading.Lock()
        self._queue: queue.SimpleQueue[Any] = queue.SimpleQueue()
        self._dispatcher: threading.Thread | None = None

    def register(self, *signals: str, callback: Callback) -> None:
        """Register a callback for one or more signals.

        Args:
            *signals: Signal names to trap (e.g. "INT", "TERM", "QUIT").
            callback: Called with no arguments when any of the signals arrive.
        """
        for name in signals:
            with self._lock:
                self._callbacks.setdefault(name, []).append(callback)
                needs_trap = name not in self._trapped

            if needs_trap:
                self._setup_trap(name)

    def registered(self, signal_name: str) -> bool:
        """Check if a signal has at least one callback."""
        with self._lock:
            return bool(self._callbacks.get(signal_name))

    def trapped(self, signal_name: str) -> bool:
        """Check if an OS-level trap is installed for a signal."""
        with self._lock:
            return signal_name in self._trapped

    def clear(self) -> None:
        """Remove all traps and callbacks."""
        with self._lock:
            trapped = list(self._trapped.items())

        for name, previous in trapped:
            try:
                signal.signal(resolve_signal(name), previous)
            except (ValueError, OSError, TypeError) as e:
                self.logger.warning("Failed to reset signal %s: %s", name, e)

        with self._lock:
            self._trapped.clear()
            self._callbacks.clear()
            if self._dispatcher is not None:
                self._queue.put(_STOP)
                self._queue = queue.SimpleQueue()
                self._dispatcher = None

    def execute_callbacks(self, signal_name: str) -> None:
        """Run every callback registered for a signal, in order.

        A failing callback is logged and does not stop the rest.
        """
        with self._lock:
            callbacks = list(self._callbacks.get(signal_name, ()))

        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                self.logger.error("Error executing callback for signal %s: %s", signal_name, e)

    def _setup_trap(self, name: str) -> None:
        try:
            signum = resolve_signal(name)
            previous = signal.signal(signum, self._make_trap(name))
        except (ValueError, OSError) as e:
            self.logger.warning("Failed to set up signal handler for %s: %s", name, e)
            return

        with self._lock:
            self._trapped[name] = previous if previous is not None else signal.SIG_DFL
        self._ensure_dispatcher()
        self.logger.debug("Set up signal handler for %s", name)

    def _make_trap(self, name: str) -> Callable[[int, Any], None]:
        def trap(signum: int, frame: Any) -> None:
            # SimpleQueue.put is reentrant; nothing else is safe here
            self._queue.put(name)

        return trap

    def _ensure_dispatcher(self) -> None:
        with self._lock:
            if self._dispatcher is not None:
                return
            self._dispatcher = threading.Thread(
                target=self._dispatch,
                args=(self._queue,),
                name="signal-dispatcher",
                daemon=True,
            )
            self._dispatcher.start()

    def _dispatch(self, events: queue.SimpleQueue[Any]) -> None:
        while True:
            name = events.get()
            if name is _STOP:
                return
            self.logger.info("Received %s signal", name)
            self.execute_callbacks(name)
