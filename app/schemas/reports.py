"""
app/schemas/reports.py

Request schemas for the report and chatbot endpoints.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Language = Literal["vi", "en"]


class _ReportRequestBase(BaseModel):
    """
    Fields shared by the three structured report requests.
    """

    model_config = ConfigDict(extra="ignore")

    province: str | None = Field(default=None, max_length=64)
    language: Language | None = None
    audience: str | None = Field(default=None, max_length=200)
    datasets: dict[str, Any] | None = None


class PopulationReportRequest(_ReportRequestBase):
    year: int | None = Field(default=None, ge=1900, le=2100)
    projection_years: int | None = Field(default=None, ge=0, le=50)


class UrbanRuralReportRequest(_ReportRequestBase):
    year: int = Field(..., ge=1900, le=2100)


class InternetReportRequest(_ReportRequestBase):
    """
    ``datasets.internet_access`` is mandatory and checked by the service,
    which reports a missing or empty list as a validation error.
    """

    year: int = Field(..., ge=1900, le=2100)


class ChatMessageIn(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str = ""


class ChatRequest(BaseModel):
    messages: list[ChatMessageIn] = Field(default_factory=list)
    language: Language | None = None
