import json
import queue

from agentcom.message.inbox import InboxStore, StoredMessage
from agentcom.transport.fallback import Poller


def _store_with_message():
    store = InboxStore()
    message = StoredMessage(
        from_agent="agt_sender",
        to_agent="agt_receiver",
        type="notification",
        payload='{"hello":"world"}',
    )
    store.insert_message(message)
    return store, message


def test_poller_delivers_unread_messages():
    store, message = _store_with_message()
    received = queue.Queue()
    poller = Poller(store, "agt_receiver", received.put, interval=0.01)
    poller.start()
    try:
        data = received.get(timeout=0.5)
    finally:
        poller.stop()
    got = json.loads(data)
    assert got["id"] == message.id
    assert got["payload"] == '{"hello":"world"}'
    assert store.find_message_by_id(message.id).delivered_at != ""


def test_poll_once_counts_and_marks_delivered():
    store, message = _store_with_message()
    seen = []
    poller = Poller(store, "agt_receiver", seen.append)
    assert poller.poll_once() == 1
    assert json.loads(seen[0])["to_agent"] == "agt_receiver"
    assert store.find_message_by_id(message.id).delivered_at


def test_poll_once_ignores_other_agents():
    store, _ = _store_with_message()
    seen = []
    assert Poller(store, "agt_other", seen.append).poll_once() == 0
    assert seen == []


def test_default_interval_is_five_seconds():
    store = InboxStore()
    assert Poller(store, "agt_receiver", lambda data: None).interval == 5.0


class FailingListStore:
    def list_unread_messages(self, agent_id):
        raise RuntimeError("database closed")

    def mark_delivered(self, message_id):
        raise AssertionError("not reached")


def test_poll_once_survives_list_failure():
    seen = []
    assert Poller(FailingListStore(), "agt_receiver", seen.append).poll_once() == 0
    assert seen == []


class FailingMarkStore:
    def __init__(self):
        self.messages = [StoredMessage(id="msg_a", to_agent="r"), StoredMessage(id="msg_b", to_agent="r")]
        self.attempts = []

    def list_unread_messages(self, agent_id):
        return list(self.messages)

    def mark_delivered(self, message_id):
        self.attempts.append(message_id)
        raise RuntimeError("locked")


def test_poll_once_continues_when_marking_fails():
    store = FailingMarkStore()
    seen = []
    assert Poller(store, "r", seen.append).poll_once() == 2
    assert [json.loads(data)["id"] for data in seen] == ["msg_a", "msg_b"]
    assert store.attempts == ["msg_a", "msg_b"]


def test_stop_halts_polling():
    store, _ = _store_with_message()
    received = queue.Queue()
    poller = Poller(store, "agt_receiver", received.put, interval=0.01)
    poller.start()
    received.get(timeout=0.5)
    poller.stop()
    while not received.empty():
        received.get_nowait()
    assert received.empty()
    assert poller.poll_once() == 1