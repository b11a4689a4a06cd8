"""
agent/state.py

LangGraph state schema for the census Q&A assistant.
"""

from typing import Optional, Tuple
from typing_extensions import TypedDict

from llm_synthesis.adapter import ChatMessage


class ChatState(TypedDict, total=False):
    """Shared state passed between the nodes of the Q&A graph."""

    messages: Tuple[ChatMessage, ...]
    language: str
    default_year: int

    question: str
    topic: str
    year: int
    region: Optional[Tuple[str, str]]

    datasets: dict
    prompt: Optional[str]
    reply: Optional[str]
