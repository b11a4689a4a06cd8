"""
agent/nodes/dataset_node.py

Dataset Fetch Node: loads the raw datasets for the detected topic, scoped
to the detected year and region.
"""

from __future__ import annotations

from collections.abc import Callable

from agent.state import ChatState
from app.connectors.census_reports_connector import CensusReportsConnector
from app.domain.census_rows import TOPIC_DATASETS


def make_dataset_node(provider: CensusReportsConnector) -> Callable[[ChatState], ChatState]:
    """
    Bind *provider* into a LangGraph node.

    Failed fetches arrive as empty lists; the node never raises for them.
    """

    def dataset_node(state: ChatState) -> ChatState:
        region = state.get("region")
        bundle = provider.fetch_datasets(
            TOPIC_DATASETS[state["topic"]],
            state["year"],
            region[0] if region else None,
        )
        return {**state, "datasets": dict(bundle.raw)}

    return dataset_node
