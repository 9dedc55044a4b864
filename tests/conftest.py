"""Shared fixtures: a fake clock and a scripted assistant API."""

from typing import Dict, List

import pytest

from assistant_relay.config import RelayConfig
from assistant_relay.errors import RemoteAPIError


class FakeClock:
    """Clock whose time only moves when sleep() is called."""

    def __init__(self, start: float = 1000.0):
        self.current = start
        self.sleeps: List[float] = []

    def now(self) -> float:
        return self.current

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += seconds


class FakeAssistantAPI:
    """Records calls and replays scripted answers in place of AssistantAPIClient."""

    def __init__(self, thread_id="t1", run_id="r1", statuses=None, messages=None):
        self.thread_id = thread_id
        self.run_id = run_id
        self.statuses = list(statuses or ["completed"])
        self.messages = messages if messages is not None else []
        self.calls: List[tuple] = []
        self.fail_on_append: Dict[int, Exception] = {}
        self.closed = False

    def create_thread(self):
        self.calls.append(("create_thread",))
        return self.thread_id

    def add_message(self, thread_id, message):
        index = sum(1 for c in self.calls if c[0] == "add_message")
        self.calls.append(("add_message", thread_id, message.content))
        if index in self.fail_on_append:
            raise self.fail_on_append[index]

    def create_run(self, thread_id, assistant_id):
        self.calls.append(("create_run", thread_id, assistant_id))
        return self.run_id

    def get_run_status(self, thread_id, run_id):
        self.calls.append(("get_run_status", thread_id, run_id))
        # Last scripted status repeats forever
        if len(self.statuses) > 1:
            return self.statuses.pop(0)
        return self.statuses[0]

    def list_messages(self, thread_id):
        self.calls.append(("list_messages", thread_id))
        return self.messages

    def close(self):
        self.closed = True

    def names(self) -> List[str]:
        return [c[0] for c in self.calls]


def assistant_message(text: str) -> Dict:
    return {
        "role": "assistant",
        "content": [{"type": "text", "text": {"value": text, "annotations": []}}],
    }


@pytest.fixture
def config():
    return RelayConfig(
        api_key="sk-test",
        assistant_id="asst_123",
        bot_name="Test Bot",
        version="1.0.0",
        poll_interval=0.5,
        poll_timeout=29.0,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_api():
    return FakeAssistantAPI(messages=[assistant_message("hello!")])


@pytest.fixture
def remote_error():
    return RemoteAPIError("POST /threads/t1/messages failed with status 500", status_code=500)
