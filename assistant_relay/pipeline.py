"""
AssistantPipeline — thread/run orchestration shared by every inbound adapter.

One call to ``run`` walks a run through its lifecycle:

    NEW -> THREAD_READY -> MESSAGES_SENT -> RUN_STARTED -> POLLING
        -> COMPLETED -> REPLY_FETCHED
        -> TIMED_OUT | FAILED

There are no retries and no cleanup: a thread created for a failed run is
simply abandoned.
"""

import logging
import time
from typing import Any, Dict, List, Optional

from .client import AssistantAPIClient
from .config import RelayConfig
from .errors import NoAssistantReply, PollTimeout, RelayError
from .models import NEW_THREAD, AssistantResponse, Message, RunState
from .polling import Deadline, SystemClock, poll_until

logger = logging.getLogger(__name__)

RUN_COMPLETED = "completed"

_TRANSITIONS = {
    RunState.NEW: {RunState.THREAD_READY, RunState.FAILED},
    RunState.THREAD_READY: {RunState.MESSAGES_SENT, RunState.FAILED},
    RunState.MESSAGES_SENT: {RunState.RUN_STARTED, RunState.FAILED},
    RunState.RUN_STARTED: {RunState.POLLING, RunState.FAILED},
    RunState.POLLING: {RunState.COMPLETED, RunState.TIMED_OUT, RunState.FAILED},
    RunState.COMPLETED: {RunState.REPLY_FETCHED, RunState.FAILED},
}


class RunTracker:
    """Records the lifecycle states one pipeline run passes through."""

    def __init__(self) -> None:
        self.state = RunState.NEW
        self.history: List[RunState] = [RunState.NEW]

    def advance(self, new_state: RunState, log_context: Optional[Dict] = None) -> None:
        if new_state not in _TRANSITIONS.get(self.state, set()):
            raise RuntimeError(f"Illegal run transition {self.state.value} -> {new_state.value}")
        logger.debug(
            f"Run state {self.state.value} -> {new_state.value}", extra=log_context or {}
        )
        self.state = new_state
        self.history.append(new_state)


class AssistantPipeline:
    """
    Sends a conversation to the configured assistant and returns its reply.

    Both the Slack adapter and the HTTP endpoint call ``run``; neither talks to
    the assistant API directly.
    """

    def __init__(
        self,
        config: RelayConfig,
        client: Optional[AssistantAPIClient] = None,
        clock: Optional[SystemClock] = None,
    ):
        self.config = config
        self.clock = clock or SystemClock()
        self.client = client or AssistantAPIClient(
            api_key=config.api_key,
            base_url=config.api_base_url,
            timeout=config.request_timeout,
        )

    def get_or_create_thread(self, messages: List[Message]) -> str:
        """Return the conversation's thread ID, creating a thread for ``NEW_THREAD``."""
        if not messages:
            raise ValueError("At least one message is required")

        thread_id = messages[0].thread_id
        if thread_id != NEW_THREAD:
            return thread_id

        thread_id = self.client.create_thread()
        logger.info(f"Created assistant thread {thread_id}", extra={"thread_id": thread_id})
        return thread_id

    def append_messages(self, thread_id: str, messages: List[Message]) -> None:
        """Append messages in order. The first failure aborts the rest."""
        for message in messages:
            self.client.add_message(thread_id, message)

    def start_run(self, thread_id: str) -> str:
        return self.client.create_run(thread_id, self.config.assistant_id)

    def send_and_run(self, thread_id: str, messages: List[Message]) -> str:
        """Append every message, then start exactly one run. Returns the run ID."""
        self.append_messages(thread_id, messages)
        return self.start_run(thread_id)

    def await_completion(
        self, thread_id: str, run_id: str, deadline: Optional[Deadline] = None
    ) -> None:
        """
        Block until the run reports ``completed``.

        The configured poll timeout starts counting now. A caller-supplied
        ``deadline`` can only make the wait shorter.

        Raises:
            PollTimeout: the run was still not completed when time ran out
            RemoteAPIError: a status check failed
        """
        limit = Deadline(self.config.poll_timeout, self.clock)
        if deadline is not None:
            limit.shorten(deadline.remaining())

        poll_until(
            fetch=lambda: self.client.get_run_status(thread_id, run_id),
            done=lambda status: status == RUN_COMPLETED,
            interval=self.config.poll_interval,
            deadline=limit,
            clock=self.clock,
            description=f"run {run_id} to complete",
        )

    def extract_reply(self, thread_id: str) -> str:
        """Return the text of the first assistant message that has textual content."""
        for entry in self.client.list_messages(thread_id):
            if not isinstance(entry, dict) or entry.get("role") != "assistant":
                continue
            text = _first_text(entry.get("content"))
            if text is not None:
                return text

        raise NoAssistantReply(f"assistant's final response not found in thread {thread_id}")

    def run(
        self,
        messages: List[Message],
        deadline: Optional[Deadline] = None,
        tracker: Optional[RunTracker] = None,
    ) -> AssistantResponse:
        """
        Run the full conversation round trip.

        Args:
            messages: Messages to append; the first one's thread ID selects the thread
            deadline: Optional caller deadline for the polling phase
            tracker: Optional RunTracker to observe lifecycle transitions

        Returns:
            A successful AssistantResponse carrying the reply text

        Raises:
            RelayError: RemoteAPIError, PollTimeout or NoAssistantReply
        """
        tracker = tracker or RunTracker()
        log_context: Dict[str, Any] = {}
        start = time.time()

        try:
            thread_id = self.get_or_create_thread(messages)
            log_context["thread_id"] = thread_id
            tracker.advance(RunState.THREAD_READY, log_context)

            self.append_messages(thread_id, messages)
            tracker.advance(RunState.MESSAGES_SENT, log_context)

            run_id = self.start_run(thread_id)
            log_context["run_id"] = run_id
            tracker.advance(RunState.RUN_STARTED, log_context)

            tracker.advance(RunState.POLLING, log_context)
            self.await_completion(thread_id, run_id, deadline)
            tracker.advance(RunState.COMPLETED, log_context)

            reply = self.extract_reply(thread_id)
            tracker.advance(RunState.REPLY_FETCHED, log_context)
        except PollTimeout as e:
            tracker.advance(RunState.TIMED_OUT, log_context)
            e.thread_id = log_context.get("thread_id")
            raise
        except RelayError as e:
            tracker.advance(RunState.FAILED, log_context)
            e.thread_id = log_context.get("thread_id")
            raise

        logger.info(
            f"Assistant replied on thread {thread_id}",
            extra={"duration_ms": round((time.time() - start) * 1000), **log_context},
        )
        return AssistantResponse.success(thread_id=thread_id, message=reply)

    def close(self) -> None:
        self.client.close()


def _first_text(content: Any) -> Optional[str]:
    if not isinstance(content, list):
        return None
    for item in content:
        if not isinstance(item, dict) or item.get("type") != "text":
            continue
        text = item.get("text")
        value = text.get("value") if isinstance(text, dict) else None
        if isinstance(value, str):
            return value
    return None
