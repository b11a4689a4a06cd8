"""
aggregation/internet_access.py

Household internet-access aggregation by province.

Formulas
--------
row rate     = supplied internet_rate_pct when finite and positive,
               else households_with_internet / household_count * 100
overall rate = sum(households_with_internet) / sum(household_count) * 100

The overall rate is computed from grand totals, never as the mean of the
per-row rates.  Division by zero yields 0.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from app.domain.census_rows import InternetAccessRow

RANKING_SIZE = 5


def effective_rate(household_count: float, households_with_internet: float, supplied_rate: float) -> float:
    """Return the supplied rate when usable, otherwise derive it from counts."""
    if supplied_rate > 0:
        return supplied_rate
    if household_count:
        return households_with_internet / household_count * 100
    return 0.0


@dataclass(frozen=True)
class ProvinceRate:
    province_code: str
    province_name: str
    household_count: float
    households_with_internet: float
    internet_rate_pct: float

    @property
    def display_name(self) -> str:
        return self.province_name or self.province_code


@dataclass(frozen=True)
class InternetTotals:
    households: float
    households_with_internet: float
    internet_rate_pct: float


@dataclass(frozen=True)
class InternetAccessAggregate:
    totals: InternetTotals
    rows: tuple[ProvinceRate, ...]
    top5: tuple[ProvinceRate, ...]
    bottom5: tuple[ProvinceRate, ...]


def aggregate_internet_access(rows: Sequence[InternetAccessRow]) -> InternetAccessAggregate:
    """
    Compute totals and top/bottom rankings.

    Both rankings use a stable sort, so rows with equal rates keep their
    original order.
    """

    total_households = 0.0
    total_with_internet = 0.0
    rated: list[ProvinceRate] = []

    for row in rows:
        total_households += row.household_count
        total_with_internet += row.households_with_internet
        rated.append(
            ProvinceRate(
                province_code=row.province_code,
                province_name=row.province_name,
                household_count=row.household_count,
                households_with_internet=row.households_with_internet,
                internet_rate_pct=effective_rate(
                    row.household_count,
                    row.households_with_internet,
                    row.internet_rate_pct,
                ),
            )
        )

    by_rate_desc = sorted(rated, key=lambda item: item.internet_rate_pct, reverse=True)
    by_rate_asc = sorted(rated, key=lambda item: item.internet_rate_pct)
    overall_rate = total_with_internet / total_households * 100 if total_households else 0.0

    return InternetAccessAggregate(
        totals=InternetTotals(
            households=total_households,
            households_with_internet=total_with_internet,
            internet_rate_pct=overall_rate,
        ),
        rows=tuple(rated),
        top5=tuple(by_rate_desc[:RANKING_SIZE]),
        bottom5=tuple(by_rate_asc[:RANKING_SIZE]),
    )


def derive_internet_insights(
    aggregate: InternetAccessAggregate,
    trend_direction: str,
    unknown_label: str,
) -> dict[str, Any]:
    """
    Deterministic values for every advertised internet insight field.

    ``unknown_label`` names provinces that carry neither a name nor a code.
    """

    def _names(items: Sequence[ProvinceRate]) -> list[str]:
        return [item.display_name or unknown_label for item in items]

    return {
        "current_rate_pct": round(aggregate.totals.internet_rate_pct, 2),
        "max_rate_pct": round(aggregate.top5[0].internet_rate_pct, 2) if aggregate.top5 else 0.0,
        "min_rate_pct": round(aggregate.bottom5[0].internet_rate_pct, 2) if aggregate.bottom5 else 0.0,
        "top_provinces": _names(aggregate.top5),
        "bottom_provinces": _names(aggregate.bottom5),
        "trend_direction": trend_direction,
    }
