from __future__ import annotations


class BotError(Exception):
    """Base class for failures that are reported back to the invoking user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UsageError(BotError):
    """Command arguments are missing or malformed."""


class ConfigurationError(BotError):
    """A required credential or key is absent or still a placeholder."""


class AdapterError(BotError):
    """A Google Sheets or Google Docs call failed."""


class CompletionError(BotError):
    """The language-model completion call failed."""
