"""
aggregation/population.py

Population snapshot used by the population report prompt: most populous
provinces, trend endpoints, age structure and sex breakdown.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from app.domain.census_rows import (
    AgeStructureRow,
    PopulationByProvinceRow,
    PopulationTrendRow,
    SexRatioRow,
)

TOP_PROVINCES = 5
MAX_AGE_GROUPS = 6
AGE_GROUP_ORDER: tuple[str, ...] = ("0-14", "15-24", "25-44", "45-59", "60+")


@dataclass(frozen=True)
class ProvincePopulation:
    province_code: str
    province_name: str
    population: float

    @property
    def display_name(self) -> str:
        return self.province_name or self.province_code


@dataclass(frozen=True)
class TrendPoint:
    census_year: int
    population: float


@dataclass(frozen=True)
class GroupCount:
    label: str
    population: float


@dataclass(frozen=True)
class PopulationSummary:
    top_provinces: tuple[ProvincePopulation, ...]
    trend_first: TrendPoint | None
    trend_last: TrendPoint | None
    age_groups: tuple[GroupCount, ...]
    sex_groups: tuple[GroupCount, ...]
    # males per 100 females, None unless both sexes are present
    sex_ratio: float | None


def _sum_by_label(pairs: Sequence[tuple[str, float]]) -> dict[str, float]:
    totals: dict[str, float] = {}
    for label, population in pairs:
        totals[label] = totals.get(label, 0.0) + population
    return totals


def _age_sort_key(label: str, first_seen: dict[str, int]) -> tuple[int, int]:
    if label in AGE_GROUP_ORDER:
        return (0, AGE_GROUP_ORDER.index(label))
    return (1, first_seen[label])


def summarize_population(
    by_province: Sequence[PopulationByProvinceRow],
    trend: Sequence[PopulationTrendRow],
    age_structure: Sequence[AgeStructureRow],
    sex_ratio: Sequence[SexRatioRow],
) -> PopulationSummary:
    """
    Reduce the four population datasets into a bounded summary.

    Age and sex rows arrive per province; they are summed across provinces
    so a nationwide request reports one figure per group.
    """

    ranked = sorted(by_province, key=lambda row: row.population, reverse=True)
    top = tuple(
        ProvincePopulation(row.province_code, row.province_name, row.population)
        for row in ranked[:TOP_PROVINCES]
    )

    ordered_trend = sorted(trend, key=lambda row: row.census_year)
    trend_first = (
        TrendPoint(ordered_trend[0].census_year, ordered_trend[0].population) if ordered_trend else None
    )
    trend_last = (
        TrendPoint(ordered_trend[-1].census_year, ordered_trend[-1].population) if ordered_trend else None
    )

    age_totals = _sum_by_label([(row.age_group, row.population) for row in age_structure])
    first_seen = {label: index for index, label in enumerate(age_totals)}
    age_groups = tuple(
        GroupCount(label, age_totals[label])
        for label in sorted(age_totals, key=lambda label: _age_sort_key(label, first_seen))
    )[:MAX_AGE_GROUPS]

    sex_totals = _sum_by_label([(row.sex, row.population) for row in sex_ratio])
    sex_groups = tuple(GroupCount(label, value) for label, value in sex_totals.items())
    males = sex_totals.get("M")
    females = sex_totals.get("F")
    ratio = round(males / females * 100, 1) if males is not None and females else None

    return PopulationSummary(
        top_provinces=top,
        trend_first=trend_first,
        trend_last=trend_last,
        age_groups=age_groups,
        sex_groups=sex_groups,
        sex_ratio=ratio,
    )
