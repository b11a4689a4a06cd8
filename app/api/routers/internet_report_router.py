"""
app/api/routers/internet_report_router.py

Internet-access report endpoint.

POST /api/reports/ai-internet-report

Body: {year, province?, language?, audience?,
       datasets: {internet_access: [...], internet_trend?: [...]}}
Returns: {summary, highlights[], insights{...}, raw_prompt}

The datasets are never fetched here; ``internet_access`` must be supplied.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.api.dependencies import require_caller
from app.schemas.reports import InternetReportRequest
from app.services.report_service import ReportService, get_report_service
from llm_synthesis.schema import InternetReport

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.post(
    "/ai-internet-report",
    response_model=InternetReport,
    status_code=status.HTTP_200_OK,
)
def ai_internet_report(
    body: InternetReportRequest,
    _caller: dict = Depends(require_caller),
    service: ReportService = Depends(get_report_service),
) -> InternetReport:
    return service.internet_report(body)
