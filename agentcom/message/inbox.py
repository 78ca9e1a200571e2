"""Persisted messages and inbox queries."""

from __future__ import annotations

import secrets
import string
import threading
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone

_ALPHABET = string.ascii_letters + string.digits + "_-"


def _nanoid(size: int = 21) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(size))


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class StoredMessage:
    """A message as kept in an agent's inbox."""

    id: str = ""
    from_agent: str = ""
    to_agent: str = ""
    type: str = ""
    topic: str = ""
    payload: str = ""
    correlation_id: str = ""
    created_at: str = ""
    delivered_at: str = ""
    read_at: str = ""

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


class InboxStore:
    """Thread-safe in-memory message table."""

    def __init__(self) -> None:
        self._messages: dict[str, StoredMessage] = {}
        self._lock = threading.Lock()

    def insert_message(self, message: StoredMessage) -> None:
        """Store a message, filling in its id and creation time."""
        with self._lock:
            if not message.id:
                message.id = "msg_" + _nanoid()
            if message.id in self._messages:
                raise ValueError(f"message already exists: {message.id}")
            message.created_at = message.created_at or _now()
            self._messages[message.id] = replace(message)

    def find_message_by_id(self, message_id: str) -> StoredMessage:
        with self._lock:
            return replace(self._get(message_id))

    def list_messages_for_agent(self, agent_id: str) -> list[StoredMessage]:
        return self._select(lambda m: m.to_agent == agent_id)

    def list_unread_messages(self, agent_id: str) -> list[StoredMessage]:
        return self._select(lambda m: m.to_agent == agent_id and not m.read_at)

    def list_by_correlation(self, correlation_id: str) -> list[StoredMessage]:
        return self._select(lambda m: m.correlation_id == correlation_id)

    def mark_read(self, message_id: str) -> None:
        with self._lock:
            self._get(message_id).read_at = _now()

    def mark_delivered(self, message_id: str) -> None:
        with self._lock:
            self._get(message_id).delivered_at = _now()

    def _get(self, message_id: str) -> StoredMessage:
        try:
            return self._messages[message_id]
        except KeyError:
            raise KeyError(f"message not found: {message_id}") from None

    def _select(self, predicate) -> list[StoredMessage]:
        with self._lock:
            return [replace(m) for m in self._messages.values() if predicate(m)]


class Inbox:
    """Read and query operations on agents' inboxes."""

    def __init__(self, store: InboxStore) -> None:
        self._store = store

    def list_messages(self, agent_id: str) -> list[StoredMessage]:
        return self._store.list_messages_for_agent(agent_id)

    def list_unread(self, agent_id: str) -> list[StoredMessage]:
        return self._store.list_unread_messages(agent_id)

    def mark_read(self, message_id: str) -> None:
        self._store.mark_read(message_id)

    def list_by_correlation(self, correlation_id: str) -> list[StoredMessage]:
        return self._store.list_by_correlation(correlation_id)