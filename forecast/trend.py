"""
forecast/trend.py

Summarizes an internet-access trend series into a direction and an
average yearly change.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from aggregation.internet_access import effective_rate
from app.domain.census_rows import InternetTrendRow
from forecast.classifier import TrendClassifier


@dataclass(frozen=True)
class TrendSummary:
    first_year: int
    last_year: int
    first_rate: float
    last_rate: float
    change: float
    avg_change_per_year: float
    direction: str


def summarize_trend(
    trend: Sequence[InternetTrendRow],
    classifier: TrendClassifier | None = None,
) -> TrendSummary | None:
    """
    Compare the first and last census points of *trend*.

    ``avg_change_per_year`` divides the change by the number of intervals
    between census points (not calendar years).  Returns ``None`` for fewer
    than two points.
    """

    if len(trend) < 2:
        return None

    ordered = sorted(trend, key=lambda row: row.census_year)
    first = ordered[0]
    last = ordered[-1]

    first_rate = effective_rate(first.household_count, first.households_with_internet, first.internet_rate_pct)
    last_rate = effective_rate(last.household_count, last.households_with_internet, last.internet_rate_pct)
    delta = last_rate - first_rate
    intervals = len(ordered) - 1 if len(ordered) > 1 else 1

    return TrendSummary(
        first_year=first.census_year,
        last_year=last.census_year,
        first_rate=first_rate,
        last_rate=last_rate,
        change=delta,
        avg_change_per_year=delta / intervals,
        direction=(classifier or TrendClassifier()).classify(delta),
    )
