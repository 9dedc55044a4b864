"""
Error types raised by the assistant pipeline.

Every error is terminal for the request that raised it. Adapters log them and
turn them into an outward failure; ``kind`` lets callers tell them apart.
"""

from typing import Optional


class RelayError(Exception):
    """Base class for pipeline failures."""

    kind = "relay_error"
    # Set by the pipeline once a thread exists, so callers can report it.
    thread_id: Optional[str] = None


class RemoteAPIError(RelayError):
    """Non-2xx status, transport failure or undecodable body from the assistant API."""

    kind = "remote_api_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.cause = cause


class PollTimeout(RelayError):
    """The run did not reach ``completed`` before the deadline."""

    kind = "poll_timeout"

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class NoAssistantReply(RelayError):
    """The thread holds no assistant-authored text message."""

    kind = "no_assistant_reply"
