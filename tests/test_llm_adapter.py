"""
tests/test_llm_adapter.py

Pytest unit tests for the completion gateway adapters.

The OpenAI SDK client is replaced by a fake exposing
``chat.completions.create``; nothing leaves the process.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import httpx
import openai
import pytest

from app.config import CompletionSettings
from app.errors import CompletionConfigurationError, CompletionTransportError, CompletionUpstreamError
from llm_synthesis.adapter import (
    ChatMessage,
    CompletionOptions,
    MockLLMAdapter,
    OpenAILLMAdapter,
    build_adapter,
    build_messages,
)

_REQUEST = httpx.Request("POST", "https://llm.test/v1/chat/completions")


class _FakeCompletions:
    def __init__(self, outcome: Any) -> None:
        self._outcome = outcome
        self.calls: list[dict[str, Any]] = []

    def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if isinstance(self._outcome, Exception):
            raise self._outcome
        return self._outcome


def _fake_client(outcome: Any) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=_FakeCompletions(outcome)))


def _completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _settings(api_key: str | None = "sk-test") -> CompletionSettings:
    return CompletionSettings(adapter="openai", model="gpt-4.1", api_key=api_key)


class TestBuildMessages:
    def test_order_is_system_prompt_then_history(self) -> None:
        messages = build_messages(
            "SYS",
            "PROMPT",
            (ChatMessage("user", "q1"), ChatMessage("assistant", "a1")),
        )
        assert [message["role"] for message in messages] == ["system", "user", "user", "assistant"]
        assert messages[1]["content"] == "PROMPT"


class TestOpenAILLMAdapter:
    def test_missing_key_raises_before_any_call(self) -> None:
        client = _fake_client(_completion("never"))
        adapter = OpenAILLMAdapter(_settings(api_key=None), client=client)
        with pytest.raises(CompletionConfigurationError):
            adapter.generate("PROMPT", system="SYS")
        assert client.chat.completions.calls == []

    def test_single_request_with_topic_options(self) -> None:
        client = _fake_client(_completion('{"summary": "ok"}'))
        adapter = OpenAILLMAdapter(_settings(), client=client)
        text = adapter.generate(
            "PROMPT",
            system="SYS",
            options=CompletionOptions(temperature=0.15, max_tokens=700),
        )
        assert text == '{"summary": "ok"}'
        (call,) = client.chat.completions.calls
        assert call["model"] == "gpt-4.1"
        assert call["temperature"] == 0.15
        assert call["max_tokens"] == 700
        assert call["messages"][0] == {"role": "system", "content": "SYS"}

    def test_no_token_cap_omits_max_tokens(self) -> None:
        client = _fake_client(_completion("hi"))
        OpenAILLMAdapter(_settings(), client=client).generate("PROMPT", system="SYS")
        assert "max_tokens" not in client.chat.completions.calls[0]

    def test_empty_content_returns_empty_string(self) -> None:
        adapter = OpenAILLMAdapter(_settings(), client=_fake_client(_completion(None)))
        assert adapter.generate("PROMPT", system="SYS") == ""

    def test_status_error_becomes_upstream_error(self) -> None:
        response = httpx.Response(429, request=_REQUEST, text='{"error": "rate limited"}')
        error = openai.APIStatusError("rate limited", response=response, body=None)
        adapter = OpenAILLMAdapter(_settings(), client=_fake_client(error))
        with pytest.raises(CompletionUpstreamError) as exc_info:
            adapter.generate("PROMPT", system="SYS")
        assert exc_info.value.status_code == 429
        assert "rate limited" in exc_info.value.body

    def test_connection_error_becomes_transport_error(self) -> None:
        adapter = OpenAILLMAdapter(
            _settings(),
            client=_fake_client(openai.APIConnectionError(request=_REQUEST)),
        )
        with pytest.raises(CompletionTransportError):
            adapter.generate("PROMPT", system="SYS")


class TestMockAdapter:
    def test_records_calls(self) -> None:
        adapter = MockLLMAdapter(response="fixed")
        assert adapter.generate("PROMPT", system="SYS") == "fixed"
        assert adapter.calls[0]["messages"][1]["content"] == "PROMPT"

    def test_build_adapter_selects_mock(self) -> None:
        settings = CompletionSettings(adapter="mock")
        assert isinstance(build_adapter(settings), MockLLMAdapter)
        assert isinstance(build_adapter(_settings()), OpenAILLMAdapter)
