import json
import re

import pytest

from agentcom.message.envelope import (
    Envelope,
    EnvelopeDecodeError,
    new_envelope,
    unmarshal_envelope,
)


def test_new_envelope_and_marshal_round_trip():
    payload = '{"hello":"world"}'
    env = new_envelope("sender", "receiver", "notification", "topic", payload)

    assert env.id.startswith("msg_")
    assert env.sender == "sender"
    assert env.recipient == "receiver"

    round_trip = unmarshal_envelope(env.marshal())
    assert round_trip.payload == payload
    assert round_trip == env


def test_unmarshal_rejects_invalid_json():
    with pytest.raises(EnvelopeDecodeError):
        unmarshal_envelope(b"{")


def test_unmarshal_rejects_wrong_field_type():
    with pytest.raises(EnvelopeDecodeError):
        unmarshal_envelope(b'{"id": 5}')


def test_unmarshal_rejects_non_object():
    with pytest.raises(EnvelopeDecodeError):
        unmarshal_envelope(b"[1,2]")


def test_marshal_omits_empty_optional_fields():
    env = Envelope(id="msg_1", sender="a", type="broadcast", payload="{}", timestamp="t")
    assert env.marshal() == (
        b'{"id":"msg_1","from":"a","type":"broadcast","payload":{},"timestamp":"t"}'
    )


def test_marshal_field_order_with_all_fields():
    env = Envelope(
        id="msg_1",
        sender="a",
        recipient="b",
        type="request",
        topic="x",
        payload="[1, 2]",
        correlation_id="c",
        timestamp="t",
    )
    assert list(json.loads(env.marshal())) == [
        "id", "from", "to", "type", "topic", "payload", "correlation_id", "timestamp",
    ]
    assert json.loads(env.marshal())["payload"] == [1, 2]


def test_marshal_rejects_invalid_payload():
    with pytest.raises(ValueError):
        Envelope(id="msg_1", payload="{bad").marshal()


def test_timestamp_format_and_bytes_payload():
    env = new_envelope("a", "b", "notification", "", b'{"k":1}')
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", env.timestamp)
    assert env.payload == '{"k":1}'


def test_ids_are_unique():
    ids = {new_envelope("a", "b", "t", "", "{}").id for _ in range(50)}
    assert len(ids) == 50