"""
app/api/routers/population_report_router.py

Population report endpoint.

POST /api/reports/ai-population-report

Body: {year?, province?, projection_years?, language?, audience?, datasets?}
Returns: {summary, highlights[], projection{...}|null, raw_prompt}
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.api.dependencies import require_caller
from app.schemas.reports import PopulationReportRequest
from app.services.report_service import ReportService, get_report_service
from llm_synthesis.schema import PopulationReport

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.post(
    "/ai-population-report",
    response_model=PopulationReport,
    status_code=status.HTTP_200_OK,
)
def ai_population_report(
    body: PopulationReportRequest,
    _caller: dict = Depends(require_caller),
    service: ReportService = Depends(get_report_service),
) -> PopulationReport:
    return service.population_report(body)
