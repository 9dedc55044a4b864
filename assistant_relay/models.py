"""
Request and response shapes shared by the pipeline and both adapters.
"""

from enum import Enum
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

from .errors import RelayError

NEW_THREAD = "0"


class Message(BaseModel):
    """One chat message bound for an assistant thread.

    ``thread_id == NEW_THREAD`` asks the pipeline to create a fresh thread.
    """

    role: Literal["user", "assistant"] = "user"
    content: str
    thread_id: str = Field(default=NEW_THREAD, alias="threadID")

    model_config = {"populate_by_name": True}

    def to_payload(self) -> Dict[str, Any]:
        """Body for the append-message call. The thread ID lives in the URL."""
        return {"role": self.role, "content": self.content}


class AssistantResponse(BaseModel):
    """Outcome of one pipeline run, as returned to callers."""

    status: Literal["success", "error"]
    thread_id: str = Field(default="", alias="threadID")
    message: str = ""
    error: Optional[str] = None

    model_config = {"populate_by_name": True}

    @classmethod
    def success(cls, thread_id: str, message: str) -> "AssistantResponse":
        return cls(status="success", thread_id=thread_id, message=message)

    @classmethod
    def from_error(cls, exc: RelayError) -> "AssistantResponse":
        return cls(
            status="error", thread_id=exc.thread_id or "", message=str(exc), error=exc.kind
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with wire field names, omitting ``error`` on success."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RunState(str, Enum):
    """Lifecycle of one pipeline run. Transitions only move forward."""

    NEW = "new"
    THREAD_READY = "thread_ready"
    MESSAGES_SENT = "messages_sent"
    RUN_STARTED = "run_started"
    POLLING = "polling"
    COMPLETED = "completed"
    REPLY_FETCHED = "reply_fetched"
    TIMED_OUT = "timed_out"
    FAILED = "failed"
