"""Structured report contracts returned by the report endpoints."""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Topic = Literal["population", "urban_rural", "internet"]


class ProjectionPointOutput(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    year: int
    projected: Union[int, float]


class ProjectionOutput(BaseModel):
    """Population projection; the model may echo it or it is filled locally."""

    model_config = ConfigDict(extra="allow", frozen=True)

    base_year: Optional[int] = None
    projection_years: Optional[int] = None
    annual_growth_rate: Optional[float] = None
    projected_population: Optional[Union[int, float]] = None
    series: List[Union[ProjectionPointOutput, int, float]] = Field(default_factory=list)


class UrbanRuralInsights(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    urban_population_share: Optional[float] = None
    rural_population_share: Optional[float] = None
    urban_household_share: Optional[float] = None
    rural_household_share: Optional[float] = None
    dominant_area_population: Optional[str] = None
    dominant_area_household: Optional[str] = None


class InternetInsights(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    current_rate_pct: Optional[float] = None
    max_rate_pct: Optional[float] = None
    min_rate_pct: Optional[float] = None
    top_provinces: Optional[List[str]] = None
    bottom_provinces: Optional[List[str]] = None
    trend_direction: Optional[str] = None


class _ReportBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    summary: str = ""
    highlights: List[str] = Field(default_factory=list)
    raw_prompt: str = ""


class PopulationReport(_ReportBase):
    """Population report contract. ``projection`` is null only without a trend."""

    projection: Optional[ProjectionOutput] = None


class UrbanRuralReport(_ReportBase):
    insights: UrbanRuralInsights = Field(default_factory=UrbanRuralInsights)


class InternetReport(_ReportBase):
    insights: InternetInsights = Field(default_factory=InternetInsights)


class ChatReply(BaseModel):
    model_config = ConfigDict(frozen=True)

    reply: str
    topic: Topic
    year: int
