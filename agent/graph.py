"""
agent/graph.py

LangGraph workflow assembly for the census Q&A assistant.

    intent -> datasets -> answer
"""

from __future__ import annotations

from collections.abc import Sequence

from langgraph.graph import END, START, StateGraph

from agent.nodes.answer_node import make_answer_node
from agent.nodes.dataset_node import make_dataset_node
from agent.nodes.intent import intent_node
from agent.state import ChatState
from app.connectors.census_reports_connector import CensusReportsConnector
from llm_synthesis.adapter import BaseLLMAdapter, ChatMessage


def build_chat_graph(provider: CensusReportsConnector, adapter: BaseLLMAdapter):
    """
    Build and compile the Q&A graph around the given collaborators.
    """
    graph = StateGraph(ChatState)

    graph.add_node("intent", intent_node)
    graph.add_node("datasets", make_dataset_node(provider))
    graph.add_node("answer", make_answer_node(adapter))

    graph.add_edge(START, "intent")
    graph.add_edge("intent", "datasets")
    graph.add_edge("datasets", "answer")
    graph.add_edge("answer", END)

    return graph.compile()


def run_chat(
    graph,
    messages: Sequence[ChatMessage],
    *,
    default_year: int,
    language: str = "vi",
) -> ChatState:
    """Invoke a compiled chat graph and return its final state."""
    initial: ChatState = {
        "messages": tuple(messages),
        "language": language,
        "default_year": default_year,
    }
    return graph.invoke(initial)
