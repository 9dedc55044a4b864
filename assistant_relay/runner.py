"""
RelayRunner — core bot orchestrator.

The runner owns:
- The assistant pipeline (threads, runs, polling, reply extraction)
- Diagnostic info for the status command
- Relay configuration (identity, credentials, poll timing)

The adapter (e.g., SlackAdapter) owns the human interface.
"""

import logging
import time
from typing import Optional

from .config import RelayConfig
from .models import NEW_THREAD, Message
from .pipeline import AssistantPipeline

logger = logging.getLogger(__name__)


class RelayRunner:
    """
    Core relay orchestrator.

        config = RelayConfig.from_env()
        RelayRunner(config=config).start()
    """

    def __init__(
        self,
        config: RelayConfig,
        adapter=None,
        pipeline: Optional[AssistantPipeline] = None,
    ):
        self.config = config
        self.pipeline = pipeline or AssistantPipeline(config)
        self._start_time = 0.0

        # Default to Slack adapter (lazy import avoids requiring tokens at import time)
        if adapter is not None:
            self.adapter = adapter
        else:
            from .slack_adapter import SlackAdapter

            self.adapter = SlackAdapter()

    def handle_message(self, user_text: str, thread_id: str = NEW_THREAD) -> str:
        """
        Process a message. Called by the adapter.

        Args:
            user_text: Raw user text
            thread_id: Existing assistant thread, or NEW_THREAD

        Returns:
            Reply text

        Raises:
            RelayError: the assistant round trip failed
        """
        messages = [Message(role="user", content=user_text, thread_id=thread_id)]
        return self.pipeline.run(messages).message

    def get_diagnostic_info(self) -> str:
        """Generate diagnostic information."""
        uptime_seconds = int(time.time() - self._start_time) if self._start_time else 0
        hours, remainder = divmod(uptime_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        uptime_str = f"{hours}h {minutes}m {seconds}s"

        return f"""*{self.config.bot_name} Diagnostics*

:robot_face: *Version:* {self.config.version}
:clock1: *Uptime:* {uptime_str}
:brain: *Assistant:* {self.config.assistant_id}
:hourglass: *Poll:* every {self.config.poll_interval}s, up to {self.config.poll_timeout}s
"""

    def start(self, **adapter_kwargs):
        """Start the relay via its adapter.

        Args:
            **adapter_kwargs: Passed to adapter.start() (e.g., register_signals=False).
        """
        self._start_time = time.time()
        logger.info(f"Starting {self.config.bot_name} v{self.config.version}...")
        self.adapter.start(self, **adapter_kwargs)
