"""
app/connectors package marker.
"""

from app.connectors.base import BaseConnector, ConnectorRequestError
from app.connectors.census_reports_connector import CensusReportsConnector, InlineDatasetSource

__all__ = [
    "BaseConnector",
    "CensusReportsConnector",
    "ConnectorRequestError",
    "InlineDatasetSource",
]
