from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from slack_bolt import Ack, App, Respond

from .handlers import CommandHandlers
from .models import CommandInvocation

LOGGER = logging.getLogger(__name__)

Handler = Callable[[CommandInvocation], None]


class CommandRouter:
    """Maps slash command names to handlers."""

    def __init__(self, handlers: CommandHandlers) -> None:
        self._routes: Dict[str, Handler] = {
            "/hello": handlers.hello,
            "/help": handlers.help,
            "/approved": handlers.approved,
            "/answer": handlers.answer,
            "/review": handlers.review,
        }

    @property
    def commands(self) -> list[str]:
        return list(self._routes)

    def dispatch(self, invocation: CommandInvocation) -> None:
        handler = self._routes.get(invocation.command)
        if handler is None:
            LOGGER.warning("Unknown command %s from %s", invocation.command, invocation.user_id)
            invocation.reply(f"❓ Unknown command `{invocation.command}`. Try `/help`.")
            return

        LOGGER.info("Handling %s for user %s", invocation.command, invocation.user_name)
        try:
            handler(invocation)
        except Exception as exc:  # pragma: no cover - last guard, handlers report their own errors
            LOGGER.exception("Unhandled error in %s", invocation.command)
            invocation.reply(f"❌ Unexpected error: {exc}", replace_original=True)

    def register(self, app: App) -> None:
        """Attach a listener for every routed command to a Bolt app."""

        for name in self._routes:
            app.command(name)(self._listener)

    def _listener(self, ack: Ack, command: Dict[str, Any], respond: Respond) -> None:
        # Slack expects the ack within 3 seconds, before any network call.
        ack()
        self.dispatch(CommandInvocation.from_slack(command, respond))
