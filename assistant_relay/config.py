"""
RelayConfig — one explicit configuration value passed to the pipeline,
runner and adapters.
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_API_BASE_URL = "https://api.openai.com/v1"
DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_POLL_TIMEOUT = 29.0


@dataclass
class RelayConfig:
    """Configuration for the relay.

    Required:
        api_key: Bearer token used for every assistant API call
        assistant_id: Assistant identity that handles runs

    Assistant API options:
        api_base_url: Base URL of the threads/runs API
        poll_interval: Seconds to sleep between run status checks
        poll_timeout: Seconds to wait for a run before giving up
        request_timeout: Per-request HTTP timeout in seconds

    Optional:
        bot_name: Display name used in logs and status messages
        version: Version string
        assistant_username: Persona to provision at startup
        status_channel: Slack channel ID for status messages
        http_host / http_port: Bind address for the HTTP endpoint
    """

    api_key: str
    assistant_id: str
    api_base_url: str = DEFAULT_API_BASE_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    poll_timeout: float = DEFAULT_POLL_TIMEOUT
    request_timeout: float = 30.0
    bot_name: str = "AI Assistant"
    version: str = "0.1.0"
    assistant_username: Optional[str] = None
    status_channel: Optional[str] = None
    http_host: str = "0.0.0.0"
    http_port: int = 8080

    def __post_init__(self):
        if not self.api_key:
            raise ValueError("Missing OPENAI_API_KEY")
        if not self.assistant_id:
            raise ValueError("Missing OPENAI_ASSISTANT_ID")
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if self.poll_timeout <= 0:
            raise ValueError("poll_timeout must be positive")

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """Build a config from environment variables."""
        env = os.environ
        return cls(
            api_key=env.get("OPENAI_API_KEY", ""),
            assistant_id=env.get("OPENAI_ASSISTANT_ID", ""),
            api_base_url=env.get("OPENAI_API_BASE_URL", DEFAULT_API_BASE_URL),
            poll_interval=float(env.get("POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL)),
            poll_timeout=float(env.get("POLL_TIMEOUT_SECONDS", DEFAULT_POLL_TIMEOUT)),
            request_timeout=float(env.get("REQUEST_TIMEOUT_SECONDS", 30.0)),
            bot_name=env.get("BOT_NAME", "AI Assistant"),
            assistant_username=env.get("ASSISTANT_USERNAME") or None,
            status_channel=env.get("STATUS_CHANNEL") or None,
            http_host=env.get("HTTP_HOST", "0.0.0.0"),
            http_port=int(env.get("HTTP_PORT", 8080)),
        )
