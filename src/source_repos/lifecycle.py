"""Process lifecycle signals that trigger catalog discovery."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)

Handler = Callable[["LifecycleSignal"], None]


class LifecycleSignal(str, Enum):
    """Signals emitted by the host application."""

    PROCESS_READY = "process_ready"
    INSTALL_COMPLETED = "install_completed"


class LifecycleHub:
    """Minimal typed signal hub.

    Handlers run synchronously on the emitting thread. A failing handler
    is logged and does not prevent the others from running.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: dict[LifecycleSignal, list[Handler]] = {s: [] for s in LifecycleSignal}

    def connect(self, signal: LifecycleSignal, handler: Handler) -> None:
        """Register a handler for a signal."""
        with self._lock:
            if handler not in self._handlers[signal]:
                self._handlers[signal].append(handler)

    def disconnect(self, signal: LifecycleSignal, handler: Handler) -> bool:
        """Remove a handler.

        Returns:
            True if removed, False if it was not connected.
        """
        with self._lock:
            try:
                self._handlers[signal].remove(handler)
            except ValueError:
                return False
            return True

    def emit(self, signal: LifecycleSignal) -> int:
        """Emit a signal to all connected handlers.

        Args:
            signal: Signal to emit.

        Returns:
            Number of handlers invoked.
        """
        with self._lock:
            handlers = list(self._handlers[signal])
        for handler in handlers:
            try:
                handler(signal)
            except Exception:
                logger.exception("Lifecycle handler failed for %s", signal.value)
        return len(handlers)
