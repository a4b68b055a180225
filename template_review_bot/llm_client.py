from __future__ import annotations

import logging
from typing import Any, Dict, List

from openai import APIError
from openai import OpenAI

from .config import OpenAIConfig
from .errors import CompletionError
from .models import ChatMessage

LOGGER = logging.getLogger(__name__)


class CompletionClient:
    """Wrapper around the OpenAI chat completion endpoint."""

    def __init__(self, conf: OpenAIConfig) -> None:
        self._conf = conf

    @property
    def model_name(self) -> str:
        return self._conf.model

    @property
    def is_configured(self) -> bool:
        """False when the API key is missing, empty or still the placeholder."""

        return self._conf.resolved_api_key is not None

    def _build_client(self, api_key: str) -> OpenAI:
        client_kwargs: Dict[str, Any] = {
            "api_key": api_key,
            "base_url": self._conf.base_url,
            "organization": self._conf.organization,
        }
        return OpenAI(**client_kwargs)

    def complete(self, messages: List[ChatMessage], max_tokens: int) -> str:
        """Send the messages and return the first choice's text."""

        api_key = self._conf.resolved_api_key
        if api_key is None:
            raise CompletionError("OpenAI API key not configured")

        client = self._build_client(api_key)
        try:
            response = client.chat.completions.create(
                model=self._conf.model,
                messages=[msg.copy() for msg in messages],
                max_tokens=max_tokens,
                timeout=self._conf.request_timeout,
            )
        except APIError as exc:
            LOGGER.warning("OpenAI request failed: %s", exc)
            raise CompletionError(f"LLM request failed: {exc}") from exc
        except Exception as exc:
            LOGGER.warning("OpenAI request failed unexpectedly: %s", exc)
            raise CompletionError(f"LLM request failed: {exc}") from exc

        if hasattr(response, "usage") and response.usage:
            LOGGER.debug(
                "Completion used %s tokens (model %s)",
                getattr(response.usage, "total_tokens", 0),
                self._conf.model,
            )

        if not response.choices:
            raise CompletionError("LLM response does not contain choices")

        return (response.choices[0].message.content or "").strip()
