"""Normalization layer for raw completion replies.

The normalizer is a small state machine:

    AWAITING_TEXT --(reply is a JSON object)--> PARSED_STRUCTURED
    AWAITING_TEXT --(anything else)-----------> FALLBACK_WRAPPED

Both terminal states produce a usable result; the fallback state keeps
the raw text so the report can still show something to the caller.
"""

import enum
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class ReplyParseError(Exception):
    """Raised when a reply cannot be read as a structured object.

    Attributes:
        stage: Which step failed ("json_parse" or "shape").
        errors: List of human-readable error descriptions.
        raw_response: The original string that failed parsing.
    """

    def __init__(self, stage: str, errors: List[str], raw_response: str) -> None:
        self.stage = stage
        self.errors = errors
        self.raw_response = raw_response
        super().__init__(
            f"Reply parsing failed at stage '{stage}': " + "; ".join(errors)
        )


class NormalizerState(str, enum.Enum):
    AWAITING_TEXT = "awaiting_text"
    PARSED_STRUCTURED = "parsed_structured"
    FALLBACK_WRAPPED = "fallback_wrapped"


@dataclass(frozen=True)
class NormalizedReply:
    """Terminal output of :class:`ResponseNormalizer`.

    ``payload`` is the parsed object in the structured state and empty in
    the fallback state.
    """

    state: NormalizerState
    raw_text: str
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_structured(self) -> bool:
        return self.state is NormalizerState.PARSED_STRUCTURED

    def summary(self) -> str:
        """Model summary, the raw text in fallback, or an empty string."""
        if not self.is_structured:
            return self.raw_text
        value = self.payload.get("summary")
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    def highlights(self) -> List[str]:
        """Model highlights as a list of strings; empty in fallback."""
        if not self.is_structured:
            return []
        value = self.payload.get("highlights")
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        if isinstance(value, (list, tuple)):
            return [item if isinstance(item, str) else json.dumps(item, ensure_ascii=False) for item in value]
        return [str(value)]

    def object_field(self, key: str) -> Optional[Dict[str, Any]]:
        """Return ``payload[key]`` when it is a JSON object, else ``None``."""
        if not self.is_structured:
            return None
        value = self.payload.get(key)
        return value if isinstance(value, dict) else None


_FENCED_BODY = re.compile(r"\A```[a-zA-Z]*[ \t]*\n?(?P<body>.*?)\s*```\Z", re.DOTALL)


def _unwrap_fence(text: str) -> str:
    """Inner text of a fenced code block, else the trimmed text."""
    trimmed = text.strip()
    fenced = _FENCED_BODY.match(trimmed)
    return fenced.group("body").strip() if fenced else trimmed


def parse_structured_reply(raw_response: str) -> Dict[str, Any]:
    """Parse a raw reply into a JSON object.

    Steps:
        1. Strip optional markdown fences.
        2. Parse as JSON.
        3. Require a top-level object.

    Raises:
        ReplyParseError: If parsing fails or the value is not an object.
    """
    cleaned = _unwrap_fence(raw_response or "")

    try:
        data = json.loads(cleaned)
    except (json.JSONDecodeError, TypeError) as exc:
        raise ReplyParseError(
            stage="json_parse",
            errors=[str(exc)],
            raw_response=raw_response,
        ) from exc

    if not isinstance(data, dict):
        raise ReplyParseError(
            stage="shape",
            errors=[f"top-level JSON must be an object, got {type(data).__name__}"],
            raw_response=raw_response,
        )
    return data


class ResponseNormalizer:
    """Single-use parse-or-fallback state machine for one reply."""

    def __init__(self) -> None:
        self._state = NormalizerState.AWAITING_TEXT

    @property
    def state(self) -> NormalizerState:
        return self._state

    def accept(self, raw_text: str) -> NormalizedReply:
        """Consume the reply text and move to a terminal state.

        Raises:
            RuntimeError: If called again after reaching a terminal state.
        """
        if self._state is not NormalizerState.AWAITING_TEXT:
            raise RuntimeError(f"Normalizer already finished in state '{self._state.value}'.")

        raw_text = raw_text or ""
        try:
            payload = parse_structured_reply(raw_text)
        except ReplyParseError as exc:
            self._state = NormalizerState.FALLBACK_WRAPPED
            logger.warning(
                "Completion reply not structured, wrapping raw text stage=%s errors=%s",
                exc.stage,
                "; ".join(exc.errors),
            )
            return NormalizedReply(state=self._state, raw_text=raw_text)

        self._state = NormalizerState.PARSED_STRUCTURED
        return NormalizedReply(state=self._state, raw_text=raw_text, payload=payload)


def normalize_reply(raw_text: str) -> NormalizedReply:
    """Run a fresh :class:`ResponseNormalizer` over *raw_text*."""
    return ResponseNormalizer().accept(raw_text)
