"""
agent/nodes/answer_node.py

Answer node: composes the Q&A prompt from the fetched excerpts and asks
the completion service for a free-text reply.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from agent.state import ChatState
from app.logging_utils import log_event
from llm_synthesis.adapter import BaseLLMAdapter
from llm_synthesis.prompt_builder import ChatPromptBuilder

logger = logging.getLogger(__name__)


def make_answer_node(adapter: BaseLLMAdapter) -> Callable[[ChatState], ChatState]:
    """
    Bind *adapter* into a LangGraph node.

    Completion errors propagate to the caller unchanged. An empty reply is
    replaced by a fixed apology in the request language.
    """

    def answer_node(state: ChatState) -> ChatState:
        builder = ChatPromptBuilder(state.get("language") or "vi")
        prompt = builder.build_prompt(
            question=state["question"],
            topic=state["topic"],
            year=state["year"],
            region=state.get("region"),
            datasets=state.get("datasets") or {},
            history=state.get("messages") or (),
        )
        raw_reply = adapter.generate(
            prompt.text,
            system=prompt.system,
            history=prompt.history,
            options=prompt.options,
        )
        reply = raw_reply.strip() or builder.phrases.text("chat.empty_reply")

        log_event(
            logger,
            logging.INFO,
            "chat_answered",
            topic=state["topic"],
            year=state["year"],
            region=state["region"][0] if state.get("region") else None,
            prompt_chars=len(prompt.text),
            reply_chars=len(reply),
        )
        return {**state, "prompt": prompt.text, "reply": reply}

    return answer_node
