"""
app/services package marker.
"""

from app.services.report_service import ReportService, get_report_service

__all__ = [
    "ReportService",
    "get_report_service",
]
