"""Routing of direct and broadcast messages between agents."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from agentcom.message.envelope import Envelope, new_envelope
from agentcom.message.inbox import StoredMessage

log = logging.getLogger(__name__)


@dataclass
class Agent:
    """A registered agent."""

    id: str = ""
    name: str = ""
    type: str = ""
    project: str = ""
    socket_path: str = ""
    status: str = ""


class AgentNotFoundError(LookupError):
    """Raised when no agent matches a lookup."""


class RoutingError(RuntimeError):
    """Raised when a message cannot be routed or persisted."""


class AgentFinder(Protocol):
    def find_by_name(self, name: str, project: str) -> Agent: ...

    def find_by_id(self, agent_id: str) -> Agent: ...

    def list_alive(self, project: str) -> list[Agent]: ...


class Transport(Protocol):
    def send(self, socket_path: str, data: bytes) -> None: ...


class MessageStore(Protocol):
    def insert_message(self, message: StoredMessage) -> None: ...


class Router:
    """Delivers messages over a transport and records them in a store."""

    def __init__(
        self,
        store: MessageStore,
        finder: AgentFinder,
        transport: Transport,
        project: str = "",
    ) -> None:
        self._store = store
        self._finder = finder
        self._transport = transport
        self._project = project

    def send(
        self,
        sender: str,
        to_name_or_id: str,
        msg_type: str,
        topic: str,
        payload: str | bytes | None,
    ) -> Envelope:
        """Send to one agent; falls back to the inbox when delivery fails."""
        target = self._resolve(to_name_or_id)
        env = new_envelope(sender, target.id, msg_type, topic, payload)
        try:
            data = env.marshal()
        except ValueError as exc:
            raise RoutingError(f"marshal envelope: {exc}") from exc

        now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        stored = StoredMessage(
            id=env.id,
            from_agent=env.sender,
            to_agent=env.recipient,
            type=env.type,
            topic=env.topic,
            payload=env.payload,
            correlation_id=env.correlation_id,
            created_at=now,
        )

        if not target.socket_path:
            log.debug("message routed to inbox (missing socket) to=%s topic=%s", target.id, topic)
            self._persist(stored, "insert fallback message")
            return env

        try:
            self._transport.send(target.socket_path, data)
        except Exception as exc:
            log.debug(
                "transport send failed; routing to inbox to=%s socket=%s error=%s",
                target.id,
                target.socket_path,
                exc,
            )
            self._persist(stored, "insert fallback message")
            return env

        stored.delivered_at = now
        self._persist(stored, "insert audit message")
        return env

    def broadcast(
        self, sender: str, topic: str, payload: str | bytes | None
    ) -> list[Envelope]:
        """Send to every alive agent except the sender, skipping failures."""
        try:
            agents = self._finder.list_alive(self._project)
        except Exception as exc:
            raise RoutingError(f"list alive agents: {exc}") from exc

        envelopes: list[Envelope] = []
        for agent in agents:
            if sender in (agent.id, agent.name):
                continue
            try:
                envelopes.append(self.send(sender, agent.id, "broadcast", topic, payload))
            except RoutingError as exc:
                log.debug("broadcast send failed from=%s to=%s error=%s", sender, agent.id, exc)
        return envelopes

    def _resolve(self, name_or_id: str) -> Agent:
        try:
            return self._finder.find_by_name(name_or_id, self._project)
        except Exception:
            pass
        try:
            return self._finder.find_by_id(name_or_id)
        except Exception as exc:
            raise RoutingError(f"resolve target: {exc}") from exc

    def _persist(self, message: StoredMessage, action: str) -> None:
        try:
            self._store.insert_message(message)
        except Exception as exc:
            raise RoutingError(f"{action}: {exc}") from exc