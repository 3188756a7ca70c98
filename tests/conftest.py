import pytest

from jobbot.db.memory_store import MemoryRecordStore
from jobbot.flow.dispatcher import Dispatcher
from jobbot.flow.events import InboundEvent


class FakeTransport:
    """Records replies and answers channel probes from a fixed set."""

    def __init__(self, reachable=("news",)):
        self.reachable = set(reachable)
        self.sent = []
        self.probes = []
        self.fail_sends = False

    async def send_message(self, chat_id, message):
        if self.fail_sends:
            return {"success": False, "error": "network down"}
        self.sent.append((chat_id, message))
        return {"success": True, "message_id": len(self.sent)}

    async def check_channel(self, channel):
        self.probes.append(channel)
        return channel in self.reachable

    def texts(self):
        return [message["text"] for _, message in self.sent]


def make_event(event, user_id="42", chat_id=42):
    return InboundEvent(user_id=user_id, chat_id=chat_id, event=event)


async def noop_probe(channel):
    return True


@pytest.fixture
def store():
    return MemoryRecordStore()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def dispatcher(store, transport):
    return Dispatcher(store, transport, bot_name="JobBot")
