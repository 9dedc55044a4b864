"""
SlackAdapter — Slack interface for the relay.

Handles Socket Mode connection, message events, the /createai command that
provisions the assistant persona, the /aistatus diagnostics command, and
reply posting. Routes messages to a
RelayRunner for processing.
"""

import logging
import os
import signal
import sys
from typing import Optional

from slack_bolt import App
from slack_bolt.adapter.socket_mode import SocketModeHandler
from slack_sdk.errors import SlackApiError

logger = logging.getLogger(__name__)

CREATE_COMMAND = "/createai"
STATUS_COMMAND = "/aistatus"


class SlackAdapter:
    """Slack Socket Mode adapter. Routes channel messages to a RelayRunner."""

    def __init__(
        self,
        bot_token: Optional[str] = None,
        app_token: Optional[str] = None,
        persona: Optional[str] = None,
    ):
        self.bot_token = bot_token or os.environ.get("SLACK_BOT_TOKEN")
        self.app_token = app_token or os.environ.get("SLACK_APP_TOKEN")

        if not self.bot_token or not self.app_token:
            raise ValueError("Missing SLACK_BOT_TOKEN or SLACK_APP_TOKEN")

        self.runner = None
        self.app = None
        # Display name replies are posted under; set by /createai or config.
        self.persona = persona
        self._bot_user_id: Optional[str] = None

    def start(self, runner, register_signals: bool = True):
        """Start Slack Socket Mode, routing messages to runner."""
        self.runner = runner
        if self.persona is None:
            self.persona = runner.config.assistant_username

        self.app = App(token=self.bot_token)
        self._register_handlers()

        if register_signals:
            signal.signal(signal.SIGTERM, self._shutdown_handler)
            signal.signal(signal.SIGINT, self._shutdown_handler)

        self._post_status(
            f":white_check_mark: {runner.config.bot_name} v{runner.config.version} is online!"
        )

        handler = SocketModeHandler(self.app, self.app_token)
        handler.start()

    def _register_handlers(self):
        """Register Slack event and command handlers."""

        @self.app.event("message")
        def handle_message(event, client):
            self._handle_message(event, client)

        @self.app.command(CREATE_COMMAND)
        def handle_create(ack, command, respond):
            ack()
            self._handle_create(command, respond)

        @self.app.command(STATUS_COMMAND)
        def handle_status(ack, respond):
            ack()
            self._handle_status(respond)

    def _handle_message(self, event, client):
        """Relay a posted message to the assistant and post its reply."""
        if event.get("subtype") or event.get("bot_id"):
            return
        try:
            bot_user_id = self._get_bot_user_id(client)
        except SlackApiError as e:
            logger.error(f"Failed to resolve bot user: {e}")
            return
        # Never answer our own posts
        if event.get("user") == bot_user_id:
            return

        user_message = (event.get("text") or "").strip()
        if not user_message:
            return

        persona = self.persona
        if not persona:
            logger.error(
                f"Failed to get AI assistant user: none provisioned, run {CREATE_COMMAND} [username]"
            )
            return

        channel = event.get("channel")
        log_context = {"context": {"channel": channel, "event_type": "message"}}

        try:
            reply = self.runner.handle_message(user_message)
        except Exception as e:
            logger.error(f"Failed to call assistant: {e}", exc_info=True, extra=log_context)
            return

        try:
            client.chat_postMessage(channel=channel, text=reply, username=persona)
        except SlackApiError as e:
            logger.error(f"Failed to create post: {e}", extra=log_context)

    def _handle_create(self, command, respond):
        """Provision the synthetic assistant persona: /createai [username]."""
        parts = (command.get("text") or "").split()
        if len(parts) != 1:
            respond(f"Usage: {CREATE_COMMAND} [username]")
            return

        self.persona = parts[0]
        logger.info(
            f"Provisioned assistant persona '{self.persona}'",
            extra={"context": {"requested_by": command.get("user_id")}},
        )
        respond("AI assistant user created successfully.")

    def _handle_status(self, respond):
        """Answer /aistatus with version, uptime and poll settings."""
        respond(self.runner.get_diagnostic_info())

    def _get_bot_user_id(self, client) -> str:
        # Cache bot user ID on first use
        if self._bot_user_id is None:
            auth_info = client.auth_test()
            self._bot_user_id = auth_info.get("user_id", "")
        return self._bot_user_id

    def _post_status(self, message: str):
        """Post to status channel if configured."""
        if not (self.runner and self.runner.config.status_channel and self.app):
            return
        try:
            self.app.client.chat_postMessage(
                channel=self.runner.config.status_channel, text=message
            )
        except SlackApiError as e:
            logger.error(f"Failed to post status: {e}")

    def _shutdown_handler(self, signum, frame):
        """Graceful shutdown."""
        logger.info("Shutdown signal received...")
        self._post_status(
            f":warning: {self.runner.config.bot_name} v{self.runner.config.version}"
            " is shutting down..."
        )
        self.runner.pipeline.close()
        sys.exit(0)
