"""Completion gateway adapters.

Provides a base interface and concrete adapters for OpenAI-compatible
chat completion APIs and a deterministic mock for testing. Every call is
a single attempt: no retries, no streaming.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import openai

from app.config import CompletionSettings
from app.errors import (
    CompletionConfigurationError,
    CompletionTransportError,
    CompletionUpstreamError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str

    def as_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class CompletionOptions:
    temperature: float = 0.2
    max_tokens: Optional[int] = None


def build_messages(
    system: str,
    prompt: str,
    history: Sequence[ChatMessage] = (),
) -> List[Dict[str, str]]:
    """Order messages as system instruction, composed prompt, then prior turns."""
    messages = [
        {"role": "system", "content": system},
        {"role": "user", "content": prompt},
    ]
    messages.extend(message.as_dict() for message in history)
    return messages


class BaseLLMAdapter(ABC):
    """Abstract base for all completion adapters."""

    @abstractmethod
    def generate(
        self,
        prompt: str,
        *,
        system: str,
        history: Sequence[ChatMessage] = (),
        options: CompletionOptions = CompletionOptions(),
    ) -> str:
        """Send one request and return the raw reply text.

        Args:
            prompt: The fully composed prompt string.
            system: System instruction sent ahead of the prompt.
            history: Prior conversation turns, oldest first.
            options: Sampling options for this topic.

        Returns:
            Raw text content of the first choice.

        Raises:
            CompletionConfigurationError: The service credential is absent.
            CompletionUpstreamError: The service answered with an error status.
            CompletionTransportError: The service could not be reached.
        """


class OpenAILLMAdapter(BaseLLMAdapter):
    """Adapter for OpenAI-compatible chat completion APIs.

    The credential is checked on every call, before the SDK client is
    built, so a missing key never results in an outbound request.
    """

    def __init__(
        self,
        settings: CompletionSettings,
        client: Optional[Any] = None,
    ) -> None:
        """Initialise the adapter.

        Args:
            settings: Model identifier, credential and optional base URL.
            client: Pre-built OpenAI client, mainly for tests.
        """
        self._settings = settings
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            client_kwargs: Dict[str, Any] = {
                "api_key": self._settings.api_key,
                "max_retries": 0,
            }
            if self._settings.base_url:
                client_kwargs["base_url"] = self._settings.base_url
            self._client = openai.OpenAI(**client_kwargs)
        return self._client

    def generate(
        self,
        prompt: str,
        *,
        system: str,
        history: Sequence[ChatMessage] = (),
        options: CompletionOptions = CompletionOptions(),
    ) -> str:
        if not self._settings.api_key:
            raise CompletionConfigurationError(
                "Completion service credential is not configured. Set LLM_API_KEY or OPENAI_API_KEY."
            )

        request: Dict[str, Any] = {
            "model": self._settings.model,
            "messages": build_messages(system, prompt, history),
            "temperature": options.temperature,
            "stream": False,
        }
        if options.max_tokens is not None:
            request["max_tokens"] = options.max_tokens

        try:
            response = self._get_client().chat.completions.create(**request)
        except openai.APIStatusError as exc:
            body = exc.response.text if exc.response is not None else str(exc)
            logger.error(
                "Completion service error model=%s status=%s body=%s",
                self._settings.model,
                exc.status_code,
                body[:500],
            )
            raise CompletionUpstreamError(status_code=exc.status_code, body=body) from exc
        except openai.APIConnectionError as exc:
            logger.error(
                "Completion service unreachable model=%s error=%s",
                self._settings.model,
                exc,
            )
            raise CompletionTransportError("Completion service could not be reached.") from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


# ---------------------------------------------------------------------------
# Fixed mock response used for local testing.
# ---------------------------------------------------------------------------
_MOCK_RESPONSE = {
    "summary": "Mock report for testing purposes.",
    "highlights": [
        "Finding A identified in test data",
        "Finding B identified in test data",
    ],
}

_MOCK_RESPONSE_JSON = json.dumps(_MOCK_RESPONSE, indent=2)


class MockLLMAdapter(BaseLLMAdapter):
    """Deterministic adapter that returns a fixed reply.

    Used for local runs and CI where no completion API is available. Calls
    are recorded on ``calls`` for inspection.
    """

    def __init__(self, response: str = _MOCK_RESPONSE_JSON) -> None:
        self._response = response
        self.calls: List[Dict[str, Any]] = []

    def generate(
        self,
        prompt: str,
        *,
        system: str,
        history: Sequence[ChatMessage] = (),
        options: CompletionOptions = CompletionOptions(),
    ) -> str:
        """Return the configured reply regardless of input."""
        self.calls.append(
            {
                "messages": build_messages(system, prompt, history),
                "options": options,
            }
        )
        return self._response


def build_adapter(settings: CompletionSettings) -> BaseLLMAdapter:
    """Instantiate the adapter selected by ``settings.adapter``.

    mock   -> MockLLMAdapter  (testing, no API key required)
    openai -> OpenAILLMAdapter (default)
    """
    if settings.adapter == "mock":
        return MockLLMAdapter()
    return OpenAILLMAdapter(settings)
