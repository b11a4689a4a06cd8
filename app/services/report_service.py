"""
app/services/report_service.py

Report pipeline orchestration.

Every report follows the same steps:
    datasets -> aggregate -> prompt -> completion -> normalize -> assemble

Dataset fetch failures and unparseable replies are recovered locally.
Only validation and completion-gateway failures reach the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from functools import lru_cache
from typing import Any

from agent.graph import build_chat_graph, run_chat
from aggregation.internet_access import aggregate_internet_access, derive_internet_insights
from aggregation.population import summarize_population
from aggregation.urban_rural import aggregate_urban_rural, derive_urban_rural_insights
from app.config import (
    ReportDefaults,
    get_completion_settings,
    get_dataset_source_settings,
    get_report_defaults,
)
from app.connectors.census_reports_connector import CensusReportsConnector, InlineDatasetSource
from app.domain.census_rows import TOPIC_DATASETS, DatasetBundle
from app.errors import ReportValidationError
from app.logging_utils import log_event
from app.schemas.reports import (
    ChatRequest,
    InternetReportRequest,
    PopulationReportRequest,
    UrbanRuralReportRequest,
)
from forecast.classifier import UNKNOWN
from forecast.projection import compute_projection
from forecast.trend import summarize_trend
from llm_synthesis.adapter import BaseLLMAdapter, ChatMessage, build_adapter
from llm_synthesis.assembler import (
    assemble_internet_report,
    assemble_population_report,
    assemble_urban_rural_report,
)
from llm_synthesis.phrasebook import Phrasebook
from llm_synthesis.prompt_builder import (
    ComposedPrompt,
    InternetPromptBuilder,
    PopulationPromptBuilder,
    UrbanRuralPromptBuilder,
)
from llm_synthesis.schema import ChatReply, InternetReport, PopulationReport, UrbanRuralReport
from llm_synthesis.validator import NormalizedReply, normalize_reply

logger = logging.getLogger(__name__)


class ReportService:
    """
    Runs the report pipelines against one dataset provider and one
    completion adapter.
    """

    def __init__(
        self,
        *,
        provider: CensusReportsConnector,
        adapter: BaseLLMAdapter,
        defaults: ReportDefaults,
    ) -> None:
        self._provider = provider
        self._adapter = adapter
        self._defaults = defaults

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def population_report(self, request: PopulationReportRequest) -> PopulationReport:
        year = request.year or self._defaults.year
        projection_years = (
            request.projection_years
            if request.projection_years is not None
            else self._defaults.projection_years
        )
        language = request.language or self._defaults.language

        bundle = self._acquire(
            topic="population",
            names=TOPIC_DATASETS["population"],
            year=year,
            province=request.province,
            inline=request.datasets,
        )
        summary = summarize_population(
            bundle.population_by_province,
            bundle.population_trend,
            bundle.age_structure,
            bundle.sex_ratio,
        )
        projection = compute_projection(bundle.population_trend, projection_years)

        prompt = PopulationPromptBuilder(language, request.audience).build_prompt(
            year=year,
            province=request.province,
            projection_years=projection_years,
            summary=summary,
            projection=projection,
        )
        reply = self._complete("population", prompt)
        return assemble_population_report(
            reply,
            projection.as_dict() if projection else None,
            prompt.text,
        )

    # ------------------------------------------------------------------
    # Urban / rural
    # ------------------------------------------------------------------

    def urban_rural_report(self, request: UrbanRuralReportRequest) -> UrbanRuralReport:
        language = request.language or self._defaults.language
        phrases = Phrasebook(language)

        bundle = self._acquire(
            topic="urban_rural",
            names=TOPIC_DATASETS["urban_rural"],
            year=request.year,
            province=request.province,
            inline=request.datasets,
            fetch_when_absent=True,
        )
        aggregate = aggregate_urban_rural(bundle.urban_rural)
        insights = derive_urban_rural_insights(aggregate, phrases.area_labels())

        prompt = UrbanRuralPromptBuilder(language, request.audience).build_prompt(
            year=request.year,
            province=request.province,
            aggregate=aggregate,
        )
        reply = self._complete("urban_rural", prompt)
        return assemble_urban_rural_report(reply, insights, prompt.text)

    # ------------------------------------------------------------------
    # Internet access
    # ------------------------------------------------------------------

    def internet_report(self, request: InternetReportRequest) -> InternetReport:
        """
        Build the internet-access report from caller-supplied datasets only.

        Current rates are never fetched server-side, so a missing or empty
        ``internet_access`` list is rejected before any aggregation.
        """

        datasets = request.datasets or {}
        current = datasets.get("internet_access")
        if not isinstance(current, list) or not current:
            raise ReportValidationError("datasets.internet_access is required and must be a non-empty array.")

        language = request.language or self._defaults.language
        phrases = Phrasebook(language)
        bundle = InlineDatasetSource(datasets).bundle(TOPIC_DATASETS["internet"])

        aggregate = aggregate_internet_access(bundle.internet_access)
        trend = summarize_trend(bundle.internet_trend)
        insights = derive_internet_insights(
            aggregate,
            phrases.direction(trend.direction if trend else UNKNOWN),
            phrases.text("label.unknown"),
        )

        prompt = InternetPromptBuilder(language, request.audience).build_prompt(
            year=request.year,
            province=request.province,
            aggregate=aggregate,
            trend=trend,
        )
        reply = self._complete("internet", prompt)
        return assemble_internet_report(reply, insights, prompt.text)

    # ------------------------------------------------------------------
    # Conversational Q&A
    # ------------------------------------------------------------------

    def chat(self, request: ChatRequest) -> ChatReply:
        if not any(message.role == "user" for message in request.messages):
            raise ReportValidationError("No user message provided")

        graph = build_chat_graph(self._provider, self._adapter)
        state = run_chat(
            graph,
            [ChatMessage(role=message.role, content=message.content) for message in request.messages],
            default_year=self._defaults.year,
            language=request.language or self._defaults.language,
        )
        return ChatReply(reply=state["reply"], topic=state["topic"], year=state["year"])

    # ------------------------------------------------------------------
    # Shared steps
    # ------------------------------------------------------------------

    def _acquire(
        self,
        *,
        topic: str,
        names: Iterable[str],
        year: int,
        province: str | None,
        inline: Mapping[str, Any] | None,
        fetch_when_absent: bool = False,
    ) -> DatasetBundle:
        """
        Use inline datasets verbatim when given, otherwise fetch.

        With ``fetch_when_absent`` an inline payload lacking every required
        dataset still triggers a fetch.
        """

        names = tuple(names)
        if inline is not None:
            source = InlineDatasetSource(inline)
            if not fetch_when_absent or any(source.has(name) for name in names):
                log_event(logger, logging.INFO, "datasets_inline", topic=topic, names=list(names))
                return source.bundle(names)
        return self._provider.fetch_datasets(names, year, province)

    def _complete(self, topic: str, prompt: ComposedPrompt) -> NormalizedReply:
        raw_text = self._adapter.generate(
            prompt.text,
            system=prompt.system,
            history=prompt.history,
            options=prompt.options,
        )
        reply = normalize_reply(raw_text)
        log_event(
            logger,
            logging.INFO,
            "report_completed",
            topic=topic,
            prompt_chars=len(prompt.text),
            reply_chars=len(raw_text),
            state=reply.state.value,
        )
        return reply


@lru_cache(maxsize=1)
def get_report_service() -> ReportService:
    """
    Return the process-wide report service built from environment settings.

    Cached so every request shares one connector and its HTTP session.
    """

    return ReportService(
        provider=CensusReportsConnector(settings=get_dataset_source_settings()),
        adapter=build_adapter(get_completion_settings()),
        defaults=get_report_defaults(),
    )
