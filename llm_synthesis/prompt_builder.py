"""Structured prompt builders for the report generators.

Each builder renders a fixed sequence of lines: role statement, scope,
a bounded rendering of the aggregate summary, and a closing clause that
declares the exact JSON output schema.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from aggregation.internet_access import InternetAccessAggregate
from aggregation.population import PopulationSummary
from aggregation.urban_rural import UrbanRuralAggregate
from app.domain.census_rows import TOPIC_DATASETS
from forecast.projection import PopulationProjection
from forecast.trend import TrendSummary
from llm_synthesis.adapter import ChatMessage, CompletionOptions
from llm_synthesis.phrasebook import Phrasebook

# Max characters of raw JSON embedded per dataset in a Q&A prompt.
CHAT_EXCERPT_CHARS = 2000

# Schema descriptors: ("string", phrase key), ("string_list", phrase key),
# ("number",), ("point_list",), ("enum", phrase keys), or a nested dict.
_POPULATION_SCHEMA: Dict[str, Any] = {
    "summary": ("string", "desc.summary"),
    "highlights": ("string_list", "desc.highlights"),
    "projection": {
        "base_year": ("number",),
        "projection_years": ("number",),
        "annual_growth_rate": ("number",),
        "projected_population": ("number",),
        "series": ("point_list",),
    },
}

_URBAN_RURAL_SCHEMA: Dict[str, Any] = {
    "summary": ("string", "desc.summary"),
    "highlights": ("string_list", "desc.highlights"),
    "insights": {
        "urban_population_share": ("number",),
        "rural_population_share": ("number",),
        "urban_household_share": ("number",),
        "rural_household_share": ("number",),
        "dominant_area_population": ("enum", ("label.urban", "label.rural", "label.unknown")),
        "dominant_area_household": ("enum", ("label.urban", "label.rural", "label.unknown")),
    },
}

_INTERNET_SCHEMA: Dict[str, Any] = {
    "summary": ("string", "desc.summary"),
    "highlights": ("string_list", "desc.highlights_range"),
    "insights": {
        "current_rate_pct": ("number",),
        "max_rate_pct": ("number",),
        "min_rate_pct": ("number",),
        "top_provinces": ("string_list", "desc.top_provinces"),
        "bottom_provinces": ("string_list", "desc.bottom_provinces"),
        "trend_direction": (
            "enum",
            (
                "direction.strong increase",
                "direction.mild increase",
                "direction.stable",
                "direction.mild decrease",
                "direction.strong decrease",
                "direction.unknown",
            ),
        ),
    },
}

_COMPLETION_OPTIONS: Dict[str, CompletionOptions] = {
    "population": CompletionOptions(temperature=0.1, max_tokens=900),
    "urban_rural": CompletionOptions(temperature=0.15, max_tokens=700),
    "internet": CompletionOptions(temperature=0.2, max_tokens=700),
    "chat": CompletionOptions(temperature=0.3, max_tokens=None),
}


@dataclass(frozen=True)
class ComposedPrompt:
    """Immutable prompt ready for the completion gateway."""

    lines: Tuple[str, ...]
    system: str
    options: CompletionOptions
    history: Tuple[ChatMessage, ...] = ()

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def _signed(value: float) -> str:
    return f"{'+' if value >= 0 else ''}{value:.2f}"


def _render_value(descriptor: Tuple[Any, ...], phrases: Phrasebook) -> str:
    kind = descriptor[0]
    if kind == "string":
        return json.dumps(phrases.text(descriptor[1]), ensure_ascii=False)
    if kind == "string_list":
        return f"[{json.dumps(phrases.text(descriptor[1]), ensure_ascii=False)}]"
    if kind == "number":
        return phrases.text("type.number")
    if kind == "point_list":
        return phrases.text("type.point_list")
    if kind == "enum":
        return " | ".join(json.dumps(phrases.text(key), ensure_ascii=False) for key in descriptor[1])
    raise ValueError(f"Unknown schema descriptor kind: {kind}")


def render_schema(schema: Mapping[str, Any], phrases: Phrasebook, indent: int = 0) -> List[str]:
    """Render a schema description as JSON-like lines."""
    pad = "  " * indent
    lines = [f"{pad}{{"] if indent == 0 else []
    items = list(schema.items())
    for position, (key, descriptor) in enumerate(items):
        comma = "," if position < len(items) - 1 else ""
        inner_pad = "  " * (indent + 1)
        if isinstance(descriptor, Mapping):
            lines.append(f'{inner_pad}"{key}": {{')
            lines.extend(render_schema(descriptor, phrases, indent + 1))
            lines.append(f"{inner_pad}}}{comma}")
        else:
            lines.append(f'{inner_pad}"{key}": {_render_value(descriptor, phrases)}{comma}')
    if indent == 0:
        lines.append("}")
    return lines


class _ReportPromptBuilder:
    """Shared scaffolding for the three structured report prompts."""

    topic: str = ""
    schema: Mapping[str, Any] = {}

    def __init__(self, language: str = "vi", audience: Optional[str] = None) -> None:
        self.phrases = Phrasebook(language)
        self.audience = audience or self.phrases.text("audience.default")

    def _scope_line(self, province: Optional[str]) -> str:
        if province:
            return self.phrases.text("scope.region", province=province)
        return self.phrases.text("scope.national")

    def _output_lines(self) -> List[str]:
        return [
            "",
            self.phrases.text("output.header"),
            self.phrases.text("output.json_intro"),
            *render_schema(self.schema, self.phrases),
            "",
            self.phrases.text("output.closing"),
        ]

    def _compose(self, lines: List[str]) -> ComposedPrompt:
        return ComposedPrompt(
            lines=tuple(lines + self._output_lines()),
            system=self.phrases.text(f"{self.topic}.system"),
            options=_COMPLETION_OPTIONS[self.topic],
        )


class PopulationPromptBuilder(_ReportPromptBuilder):
    topic = "population"
    schema = _POPULATION_SCHEMA

    def build_prompt(
        self,
        *,
        year: int,
        province: Optional[str],
        projection_years: int,
        summary: PopulationSummary,
        projection: Optional[PopulationProjection],
    ) -> ComposedPrompt:
        p = self.phrases
        lines = [
            p.text("population.role", audience=self.audience),
            p.text("population.task", year=year, years=projection_years),
            self._scope_line(province),
            p.text("population.data_header"),
        ]

        if summary.top_provinces:
            items = "; ".join(
                f"{row.display_name}: {p.count(row.population)}" for row in summary.top_provinces
            )
            lines.append(p.text("population.top", items=items))
        else:
            lines.append(p.text("population.top_missing"))

        if summary.trend_first and summary.trend_last:
            lines.append(
                p.text(
                    "population.trend",
                    first_year=summary.trend_first.census_year,
                    first=p.count(summary.trend_first.population),
                    last_year=summary.trend_last.census_year,
                    last=p.count(summary.trend_last.population),
                )
            )
        else:
            lines.append(p.text("population.trend_missing"))

        if projection and projection.projected_population is not None:
            lines.append(
                p.text(
                    "population.projection",
                    rate=f"{projection.annual_growth_rate * 100:.3f}",
                    target_year=projection.base_year + projection.projection_years,
                    projected=p.count(projection.projected_population),
                )
            )
        else:
            lines.append(p.text("population.projection_missing"))

        if summary.age_groups:
            items = "; ".join(
                f"{group.label or p.text('label.unknown')}: {p.count(group.population)}"
                for group in summary.age_groups
            )
            lines.append(p.text("population.age", items=items))
        else:
            lines.append(p.text("population.age_missing"))

        if summary.sex_groups:
            items = "; ".join(
                f"{p.sex(group.label)}: {p.count(group.population)}" for group in summary.sex_groups
            )
            lines.append(p.text("population.sex", items=items))
            if summary.sex_ratio is not None:
                lines.append(p.text("population.sex_ratio", ratio=f"{summary.sex_ratio:.1f}"))
        else:
            lines.append(p.text("population.sex_missing"))

        return self._compose(lines)


class UrbanRuralPromptBuilder(_ReportPromptBuilder):
    topic = "urban_rural"
    schema = _URBAN_RURAL_SCHEMA

    def build_prompt(
        self,
        *,
        year: int,
        province: Optional[str],
        aggregate: UrbanRuralAggregate,
    ) -> ComposedPrompt:
        p = self.phrases
        lines = [
            p.text("urban_rural.role", audience=self.audience),
            p.text("urban_rural.task", year=year),
            self._scope_line(province),
            "",
            p.text("urban_rural.data_header"),
            p.text("urban_rural.total_population", value=p.count(aggregate.totals.population)),
            p.text("urban_rural.total_households", value=p.count(aggregate.totals.households)),
        ]

        if aggregate.items:
            items = "; ".join(
                p.text(
                    "urban_rural.item",
                    area=item.area_type,
                    population=p.count(item.population),
                    population_pct=f"{item.population_percent:.1f}",
                    households=p.count(item.household_count),
                    household_pct=f"{item.household_percent:.1f}",
                )
                for item in aggregate.items
            )
            lines.append(p.text("urban_rural.items", items=items))
        else:
            lines.append(p.text("urban_rural.items_missing"))

        return self._compose(lines)


class InternetPromptBuilder(_ReportPromptBuilder):
    topic = "internet"
    schema = _INTERNET_SCHEMA

    def _scope_line(self, province: Optional[str]) -> str:
        if province:
            return super()._scope_line(province)
        return self.phrases.text("internet.scope_national")

    def build_prompt(
        self,
        *,
        year: int,
        province: Optional[str],
        aggregate: InternetAccessAggregate,
        trend: Optional[TrendSummary],
    ) -> ComposedPrompt:
        p = self.phrases
        unknown = p.text("label.unknown")
        lines = [
            p.text("internet.role", audience=self.audience),
            p.text("internet.task"),
            self._scope_line(province),
            "",
            p.text("internet.data_header", year=year),
            p.text(
                "internet.totals",
                households=p.count(aggregate.totals.households),
                with_internet=p.count(aggregate.totals.households_with_internet),
                rate=f"{aggregate.totals.internet_rate_pct:.2f}",
            ),
        ]

        if aggregate.top5:
            items = "; ".join(
                f"{row.display_name or unknown}: {row.internet_rate_pct:.2f}%" for row in aggregate.top5
            )
            lines.append(p.text("internet.top", items=items))
        if aggregate.bottom5:
            items = "; ".join(
                f"{row.display_name or unknown}: {row.internet_rate_pct:.2f}%" for row in aggregate.bottom5
            )
            lines.append(p.text("internet.bottom", items=items))

        lines.append("")
        lines.append(p.text("internet.trend_header"))
        if trend:
            lines.append(
                p.text(
                    "internet.trend",
                    first_year=trend.first_year,
                    last_year=trend.last_year,
                    first_rate=f"{trend.first_rate:.2f}",
                    last_rate=f"{trend.last_rate:.2f}",
                    change=_signed(trend.change),
                    avg_change=_signed(trend.avg_change_per_year),
                    direction=p.direction(trend.direction),
                )
            )
        else:
            lines.append(p.text("internet.trend_missing"))

        return self._compose(lines)


def excerpt(rows: Any, limit: int = CHAT_EXCERPT_CHARS) -> str:
    """Compact JSON of *rows*, cut at *limit* characters."""
    return json.dumps(rows, ensure_ascii=False, separators=(",", ":"), default=str)[:limit]


class ChatPromptBuilder:
    """Builds the free-form Q&A prompt with raw dataset excerpts."""

    def __init__(self, language: str = "vi") -> None:
        self.phrases = Phrasebook(language)

    def build_prompt(
        self,
        *,
        question: str,
        topic: str,
        year: int,
        region: Optional[Tuple[str, str]],
        datasets: Mapping[str, Any],
        history: Sequence[ChatMessage] = (),
    ) -> ComposedPrompt:
        """Compose the Q&A prompt.

        Args:
            question: Latest user message.
            topic: Detected topic.
            year: Detected or default year.
            region: ``(code, display name)`` of the detected region, if any.
            datasets: Raw rows keyed by dataset name.
            history: Conversation turns appended after the prompt.
        """
        p = self.phrases
        lines = [
            p.text("chat.question", question=question),
            p.text("chat.topic", topic=topic, year=year),
            p.text("chat.intro"),
        ]
        if region:
            code, name = region
            lines.append(p.text("chat.scope_region", name=name, code=code))
        else:
            lines.append(p.text("chat.scope_national"))

        for index, name in enumerate(TOPIC_DATASETS.get(topic, ()), start=1):
            lines.append(f"\n[{index}] {p.text(f'chat.dataset.{name}')}")
            lines.append(excerpt(datasets.get(name) or []))

        lines.append("\n" + p.text(f"chat.task.{topic}"))
        lines.append("\n" + p.text("chat.requirements"))

        return ComposedPrompt(
            lines=tuple(lines),
            system=p.text("chat.system"),
            options=_COMPLETION_OPTIONS["chat"],
            history=tuple(history),
        )

