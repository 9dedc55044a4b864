"""
assistant-relay: relay chat messages to a hosted assistant and post its reply.

Slack bot:
    from assistant_relay import RelayConfig, RelayRunner

    RelayRunner(config=RelayConfig.from_env()).start()

HTTP endpoint:
    from assistant_relay import create_app

    app = create_app(config=RelayConfig.from_env())

Direct use of the pipeline:
    from assistant_relay import AssistantPipeline, Message

    pipeline = AssistantPipeline(config)
    reply = pipeline.run([Message(role="user", content="hi")])
"""

from .client import AssistantAPIClient
from .config import RelayConfig
from .errors import NoAssistantReply, PollTimeout, RelayError, RemoteAPIError
from .http_api import create_app
from .models import NEW_THREAD, AssistantResponse, Message, RunState
from .pipeline import AssistantPipeline, RunTracker
from .polling import Deadline, SystemClock, poll_until
from .runner import RelayRunner

__all__ = [
    "AssistantAPIClient",
    "AssistantPipeline",
    "AssistantResponse",
    "Deadline",
    "Message",
    "NEW_THREAD",
    "NoAssistantReply",
    "PollTimeout",
    "RelayConfig",
    "RelayError",
    "RelayRunner",
    "RemoteAPIError",
    "RunState",
    "RunTracker",
    "SystemClock",
    "create_app",
    "poll_until",
]
__version__ = "0.1.0"
