from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from slack_bolt import App

from .config import AppConfig, load_config
from .errors import ConfigurationError
from .handlers import CommandHandlers
from .router import CommandRouter

LOGGER = logging.getLogger("template_review_bot")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Slack bot for template reviews backed by Google Sheets and OpenAI"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Optional path to a YAML configuration file; the environment is used otherwise",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (overrides configuration and $PORT)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def build_app(config: AppConfig) -> App:
    """Create the Bolt app with every command registered."""

    token = config.slack.resolved_bot_token
    signing_secret = config.slack.resolved_signing_secret
    if not token or not signing_secret:
        raise ConfigurationError("Slack bot token and signing secret must be configured")

    app = App(token=token, signing_secret=signing_secret)
    router = CommandRouter(CommandHandlers.from_config(config))
    router.register(app)
    LOGGER.info("Registered commands: %s", ", ".join(router.commands))
    return app


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        app = build_app(config)
        port = args.port or config.slack.resolved_port
    except (ConfigurationError, FileNotFoundError, ValueError) as exc:
        LOGGER.error("Startup failed: %s", exc)
        return 1

    LOGGER.info("⚡️ Slack app is running on port %s!", port)
    app.start(port=port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
