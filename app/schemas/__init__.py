"""
app/schemas package marker.
"""

from app.schemas.reports import (
    ChatMessageIn,
    ChatRequest,
    InternetReportRequest,
    PopulationReportRequest,
    UrbanRuralReportRequest,
)

__all__ = [
    "ChatMessageIn",
    "ChatRequest",
    "InternetReportRequest",
    "PopulationReportRequest",
    "UrbanRuralReportRequest",
]
