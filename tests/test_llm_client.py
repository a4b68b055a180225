"""Tests for CompletionClient with the OpenAI SDK mocked out."""

from types import SimpleNamespace
from unittest.mock import patch

import pytest

from template_review_bot.config import OPENAI_KEY_PLACEHOLDER, OpenAIConfig
from template_review_bot.errors import CompletionError
from template_review_bot.llm_client import CompletionClient

MESSAGES = [{"role": "user", "content": "hi"}]


def _response(*contents):
    choices = [SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents]
    return SimpleNamespace(choices=choices, usage=SimpleNamespace(total_tokens=12))


@pytest.fixture
def openai_cls():
    with patch("template_review_bot.llm_client.OpenAI") as mocked:
        yield mocked


@pytest.mark.parametrize("api_key", [None, "", OPENAI_KEY_PLACEHOLDER])
def test_unconfigured_key_fails_before_any_call(openai_cls, api_key):
    client = CompletionClient(OpenAIConfig(api_key=api_key))

    assert client.is_configured is False
    with pytest.raises(CompletionError, match="not configured"):
        client.complete(MESSAGES, 50)
    openai_cls.assert_not_called()


def test_placeholder_from_environment_is_unconfigured(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", OPENAI_KEY_PLACEHOLDER)

    assert CompletionClient(OpenAIConfig()).is_configured is False


def test_returns_first_choice_text(openai_cls):
    create = openai_cls.return_value.chat.completions.create
    create.return_value = _response("  first answer \n", "second")
    client = CompletionClient(OpenAIConfig(api_key="sk-live"))

    assert client.complete(MESSAGES, 300) == "first answer"

    openai_cls.assert_called_once_with(api_key="sk-live", base_url=None, organization=None)
    kwargs = create.call_args.kwargs
    assert kwargs["model"] == "gpt-3.5-turbo"
    assert kwargs["messages"] == MESSAGES
    assert kwargs["max_tokens"] == 300
    assert kwargs["timeout"] == 60


def test_model_is_configurable(openai_cls):
    create = openai_cls.return_value.chat.completions.create
    create.return_value = _response("ok")
    client = CompletionClient(OpenAIConfig(api_key="sk-live", model="gpt-4o-mini"))

    client.complete(MESSAGES, 10)

    assert create.call_args.kwargs["model"] == "gpt-4o-mini"
    assert client.model_name == "gpt-4o-mini"


def test_call_errors_become_completion_errors(openai_cls):
    openai_cls.return_value.chat.completions.create.side_effect = RuntimeError("connection reset")
    client = CompletionClient(OpenAIConfig(api_key="sk-live"))

    with pytest.raises(CompletionError) as exc_info:
        client.complete(MESSAGES, 10)

    assert "connection reset" in exc_info.value.message


def test_response_without_choices(openai_cls):
    openai_cls.return_value.chat.completions.create.return_value = _response()
    client = CompletionClient(OpenAIConfig(api_key="sk-live"))

    with pytest.raises(CompletionError, match="does not contain choices"):
        client.complete(MESSAGES, 10)
