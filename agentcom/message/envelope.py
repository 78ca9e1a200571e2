"""Wire envelope for agent messages."""

from __future__ import annotations

import json
import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timezone

_ALPHABET = string.ascii_letters + string.digits + "_-"
_STRING_FIELDS = {
    "id": "id",
    "from": "sender",
    "to": "recipient",
    "type": "type",
    "topic": "topic",
    "correlation_id": "correlation_id",
    "timestamp": "timestamp",
}


class EnvelopeDecodeError(ValueError):
    """Raised when bytes cannot be read as an envelope."""


def _nanoid(size: int = 21) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(size))


def _raw_json(payload: str | bytes | None) -> str:
    if payload is None:
        return ""
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload).decode("utf-8")
    return payload


def _compact(value) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


@dataclass
class Envelope:
    """A routed message; payload holds raw JSON text."""

    id: str = ""
    sender: str = ""
    recipient: str = ""
    type: str = ""
    topic: str = ""
    payload: str = ""
    correlation_id: str = ""
    timestamp: str = ""

    def marshal(self) -> bytes:
        """Serialise the envelope to compact JSON bytes."""
        if self.payload:
            try:
                payload = json.loads(self.payload)
            except json.JSONDecodeError as exc:
                raise ValueError(f"invalid payload JSON: {exc}") from exc
        else:
            payload = None

        doc: dict = {"id": self.id, "from": self.sender}
        if self.recipient:
            doc["to"] = self.recipient
        doc["type"] = self.type
        if self.topic:
            doc["topic"] = self.topic
        doc["payload"] = payload
        if self.correlation_id:
            doc["correlation_id"] = self.correlation_id
        doc["timestamp"] = self.timestamp
        return _compact(doc).encode("utf-8")


def new_envelope(
    sender: str,
    recipient: str,
    msg_type: str,
    topic: str,
    payload: str | bytes | None,
) -> Envelope:
    """Build an envelope with a fresh id and the current UTC time."""
    return Envelope(
        id="msg_" + _nanoid(),
        sender=sender,
        recipient=recipient,
        type=msg_type,
        topic=topic,
        payload=_raw_json(payload),
        timestamp=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
    )


def unmarshal_envelope(data: str | bytes) -> Envelope:
    """Parse JSON data into an envelope."""
    try:
        doc = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise EnvelopeDecodeError(f"invalid envelope JSON: {exc}") from exc
    if doc is None:
        return Envelope()
    if not isinstance(doc, dict):
        raise EnvelopeDecodeError("envelope must be a JSON object")

    fields: dict[str, str] = {}
    for key, attr in _STRING_FIELDS.items():
        value = doc.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise EnvelopeDecodeError(f"field {key!r} must be a string")
        fields[attr] = value
    if "payload" in doc:
        fields["payload"] = _compact(doc["payload"])
    return Envelope(**fields)