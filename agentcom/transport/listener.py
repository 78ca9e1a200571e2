"""Fan-out of incoming payloads to registered callbacks."""

from __future__ import annotations

import threading
from collections.abc import Callable


class Listener:
    """Keeps a list of callbacks and hands each payload to all of them."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[bytes], None]] = []

    def on_message(self, callback: Callable[[bytes], None] | None) -> None:
        """Register a callback; None is ignored."""
        if callback is None:
            return
        with self._lock:
            self._callbacks.append(callback)

    def handle(self, data: bytes) -> None:
        """Call every callback registered so far with the payload."""
        with self._lock:
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback(data)