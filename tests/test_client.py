"""Tests for assistant_relay.client"""

import json

import httpx
import pytest

from assistant_relay.client import AssistantAPIClient
from assistant_relay.errors import RemoteAPIError
from assistant_relay.models import Message

BASE_URL = "https://api.example.test/v1"


def _client(handler):
    """Client backed by an httpx MockTransport that records requests."""
    requests = []

    def record(request):
        requests.append(request)
        return handler(request)

    http_client = httpx.Client(transport=httpx.MockTransport(record))
    return AssistantAPIClient(api_key="sk-test", base_url=BASE_URL, http_client=http_client), requests


class TestAssistantAPIClientInit:
    def test_trailing_slash_stripped(self):
        c = AssistantAPIClient(api_key="sk-test", base_url=BASE_URL + "/")
        assert c.base_url == BASE_URL
        c.close()

    def test_context_manager_closes(self):
        with AssistantAPIClient(api_key="sk-test", base_url=BASE_URL) as c:
            pass
        assert c.client.is_closed


class TestRequests:
    def test_create_thread(self):
        c, requests = _client(lambda r: httpx.Response(200, json={"id": "thread_1"}))

        assert c.create_thread() == "thread_1"
        assert requests[0].method == "POST"
        assert str(requests[0].url) == f"{BASE_URL}/threads"

    def test_headers_use_single_credential(self):
        """Every call sends the same bearer token."""
        def handler(request):
            if request.url.path.endswith("/runs/run_1"):
                return httpx.Response(200, json={"status": "queued"})
            return httpx.Response(200, json={"id": "x", "data": []})

        c, requests = _client(handler)
        c.create_thread()
        c.get_run_status("t1", "run_1")
        c.list_messages("t1")

        for request in requests:
            assert request.headers["Authorization"] == "Bearer sk-test"
            assert request.headers["OpenAI-Beta"] == "assistants=v2"

    def test_add_message_body(self):
        c, requests = _client(lambda r: httpx.Response(200, json={"id": "msg_1"}))

        c.add_message("t1", Message(role="user", content="hi", thread_id="t1"))

        assert str(requests[0].url) == f"{BASE_URL}/threads/t1/messages"
        assert json.loads(requests[0].content) == {"role": "user", "content": "hi"}

    def test_create_run_body(self):
        c, requests = _client(lambda r: httpx.Response(200, json={"id": "run_1"}))

        assert c.create_run("t1", "asst_123") == "run_1"
        assert str(requests[0].url) == f"{BASE_URL}/threads/t1/runs"
        assert json.loads(requests[0].content) == {"assistant_id": "asst_123"}

    def test_get_run_status(self):
        c, requests = _client(lambda r: httpx.Response(200, json={"status": "in_progress"}))

        assert c.get_run_status("t1", "run_1") == "in_progress"
        assert requests[0].method == "GET"
        assert str(requests[0].url) == f"{BASE_URL}/threads/t1/runs/run_1"

    def test_list_messages(self):
        data = [{"role": "assistant", "content": []}]
        c, _ = _client(lambda r: httpx.Response(200, json={"object": "list", "data": data}))

        assert c.list_messages("t1") == data


class TestErrors:
    def test_non_2xx_raises(self):
        c, _ = _client(lambda r: httpx.Response(401, json={"error": {"message": "bad key"}}))

        with pytest.raises(RemoteAPIError) as exc_info:
            c.create_thread()

        assert exc_info.value.status_code == 401
        assert "401" in str(exc_info.value)

    def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        c, _ = _client(handler)

        with pytest.raises(RemoteAPIError) as exc_info:
            c.create_run("t1", "asst_123")

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    def test_invalid_json_raises(self):
        c, _ = _client(lambda r: httpx.Response(200, content=b"<html>oops</html>"))

        with pytest.raises(RemoteAPIError, match="not JSON"):
            c.get_run_status("t1", "run_1")

    def test_non_object_body_raises(self):
        c, _ = _client(lambda r: httpx.Response(200, json=["a"]))

        with pytest.raises(RemoteAPIError, match="expected an object"):
            c.create_thread()

    def test_missing_field_raises(self):
        c, _ = _client(lambda r: httpx.Response(200, json={"object": "thread"}))

        with pytest.raises(RemoteAPIError, match="missing 'id'"):
            c.create_thread()

    def test_non_list_data_raises(self):
        c, _ = _client(lambda r: httpx.Response(200, json={"data": {"role": "assistant"}}))

        with pytest.raises(RemoteAPIError, match="non-list"):
            c.list_messages("t1")

    def test_append_error_body_still_checked(self):
        c, _ = _client(lambda r: httpx.Response(500, text="upstream exploded"))

        with pytest.raises(RemoteAPIError) as exc_info:
            c.add_message("t1", Message(content="hi"))

        assert exc_info.value.status_code == 500
