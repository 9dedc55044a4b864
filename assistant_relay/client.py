"""
Assistant API client — authenticated JSON calls against the threads/runs API.

Handles:
- Thread creation and message appends
- Starting runs and reading their status
- Listing thread messages
- Mapping every HTTP, transport or decode failure to RemoteAPIError
"""

import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from .errors import RemoteAPIError
from .models import Message

logger = logging.getLogger(__name__)


class AssistantAPIClient:
    """Thin wrapper over httpx for the assistant threads API. Holds no per-request state."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.client = http_client or httpx.Client(timeout=timeout)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "OpenAI-Beta": "assistants=v2",
        }

    def _request(
        self, method: str, path: str, payload: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Issue one request and return the decoded JSON object."""
        start = time.time()
        try:
            response = self.client.request(
                method,
                f"{self.base_url}{path}",
                headers=self._headers(),
                json=payload,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(
                f"Assistant API {method} {path} returned {status}",
                extra={"context": {"method": method, "path": path, "status": status}},
            )
            raise RemoteAPIError(
                f"{method} {path} failed with status {status}", status_code=status, cause=e
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Assistant API {method} {path} failed: {e}")
            raise RemoteAPIError(f"{method} {path} failed: {e}", cause=e) from e

        duration_ms = round((time.time() - start) * 1000)
        logger.debug(
            f"Assistant API {method} {path}: {response.status_code}",
            extra={"duration_ms": duration_ms, "context": {"method": method, "path": path}},
        )

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteAPIError(
                f"{method} {path} returned a body that is not JSON",
                status_code=response.status_code,
                cause=e,
            ) from e
        if not isinstance(data, dict):
            raise RemoteAPIError(
                f"{method} {path} returned {type(data).__name__}, expected an object",
                status_code=response.status_code,
            )
        return data

    @staticmethod
    def _require(data: Dict[str, Any], key: str, path: str) -> Any:
        value = data.get(key)
        if value is None:
            raise RemoteAPIError(f"Response from {path} is missing '{key}'")
        return value

    def create_thread(self) -> str:
        """Create an empty thread and return its ID."""
        path = "/threads"
        return str(self._require(self._request("POST", path, {}), "id", path))

    def add_message(self, thread_id: str, message: Message) -> None:
        """Append one message to a thread."""
        self._request("POST", f"/threads/{thread_id}/messages", message.to_payload())

    def create_run(self, thread_id: str, assistant_id: str) -> str:
        """Start a run of ``assistant_id`` over the thread and return the run ID."""
        path = f"/threads/{thread_id}/runs"
        data = self._request("POST", path, {"assistant_id": assistant_id})
        return str(self._require(data, "id", path))

    def get_run_status(self, thread_id: str, run_id: str) -> str:
        path = f"/threads/{thread_id}/runs/{run_id}"
        return str(self._require(self._request("GET", path), "status", path))

    def list_messages(self, thread_id: str) -> List[Any]:
        """Return the thread's messages in the order the API lists them."""
        path = f"/threads/{thread_id}/messages"
        data = self._require(self._request("GET", path), "data", path)
        if not isinstance(data, list):
            raise RemoteAPIError(f"Response from {path} has a non-list 'data'")
        return data

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "AssistantAPIClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
