"""Polling delivery of messages left in the inbox."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable
from typing import Protocol

from agentcom.message.inbox import StoredMessage

log = logging.getLogger(__name__)

DEFAULT_INTERVAL = 5.0


class PollingStore(Protocol):
    def list_unread_messages(self, agent_id: str) -> list[StoredMessage]: ...

    def mark_delivered(self, message_id: str) -> None: ...


class Poller:
    """Periodically hands an agent's unread messages to a handler."""

    def __init__(
        self,
        store: PollingStore,
        agent_id: str,
        handler: Callable[[bytes], None],
        interval: float = DEFAULT_INTERVAL,
    ) -> None:
        self._store = store
        self._agent_id = agent_id
        self._handler = handler
        self.interval = interval
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Begin polling in a background thread until stop() is called."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stopped = threading.Event()
        self._thread = threading.Thread(
            target=self._loop, args=(self._stopped,), daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop polling and wait for the current round to finish."""
        self._stopped.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def poll_once(self) -> int:
        """Deliver unread messages once; return how many reached the handler."""
        try:
            messages = self._store.list_unread_messages(self._agent_id)
        except Exception as exc:
            log.debug("fallback poll list unread failed agent_id=%s error=%s", self._agent_id, exc)
            return 0

        handled = 0
        for message in messages:
            try:
                data = json.dumps(message.to_dict()).encode("utf-8")
            except (TypeError, ValueError) as exc:
                log.debug("fallback poll marshal message failed message_id=%s error=%s", message.id, exc)
                continue
            self._handler(data)
            handled += 1
            try:
                self._store.mark_delivered(message.id)
            except Exception as exc:
                log.debug("fallback poll mark delivered failed message_id=%s error=%s", message.id, exc)
        return handled

    def _loop(self, stopped: threading.Event) -> None:
        while not stopped.wait(self.interval):
            self.poll_once()