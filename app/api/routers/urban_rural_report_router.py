"""
app/api/routers/urban_rural_report_router.py

Urban/rural report endpoint.

POST /api/reports/ai-urban-rural-report

Body: {year, province?, language?, audience?, datasets?}
Returns: {summary, highlights[], insights{...}, raw_prompt}
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.api.dependencies import require_caller
from app.schemas.reports import UrbanRuralReportRequest
from app.services.report_service import ReportService, get_report_service
from llm_synthesis.schema import UrbanRuralReport

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.post(
    "/ai-urban-rural-report",
    response_model=UrbanRuralReport,
    status_code=status.HTTP_200_OK,
)
def ai_urban_rural_report(
    body: UrbanRuralReportRequest,
    _caller: dict = Depends(require_caller),
    service: ReportService = Depends(get_report_service),
) -> UrbanRuralReport:
    return service.urban_rural_report(body)
