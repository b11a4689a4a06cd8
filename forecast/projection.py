"""
forecast/projection.py

Compound-growth population projection.
No sklearn, no statsmodels, no I/O.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from app.domain.census_rows import PopulationTrendRow
from forecast.base import BaseForecastModel


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class ProjectionPoint:
    year: int
    projected: int


@dataclass(frozen=True)
class PopulationProjection:
    """
    Deterministic projection attached to every population report.
    """

    base_year: int
    projection_years: int
    annual_growth_rate: float
    projected_population: int | None
    series: tuple[ProjectionPoint, ...]

    def as_dict(self) -> dict[str, Any]:
        return {
            "base_year": self.base_year,
            "projection_years": self.projection_years,
            "annual_growth_rate": self.annual_growth_rate,
            "projected_population": self.projected_population,
            "series": [
                {"year": point.year, "projected": point.projected}
                for point in self.series
            ],
        }


class CompoundGrowthProjection(BaseForecastModel):
    """
    Derives a constant annual growth rate from the first and last trend
    points and compounds it forward one year at a time.

        rate      = (last / first) ** (1 / (last_year - first_year)) - 1
        year_k    = round(year_(k-1) * (1 + rate)),  year_0 = last

    The rate is 0 when the first value is not positive or the trend spans
    zero years.  Each compounding step is rounded before the next one, so
    the series matches what a reader would get by hand.
    """

    # Minimum number of data points required for a growth rate.
    MIN_POINTS: int = 2

    def forecast(
        self,
        trend: Sequence[PopulationTrendRow],
        horizon: int,
    ) -> PopulationProjection | None:
        """
        Parameters
        ----------
        trend:
            Population observations, any order.
        horizon:
            Years to project past the last census year.  Negative values
            are treated as 0.

        Returns
        -------
        PopulationProjection, or ``None`` when fewer than ``MIN_POINTS``
        observations are available.
        """
        if len(trend) < self.MIN_POINTS:
            return None

        ordered = sorted(trend, key=lambda row: row.census_year)
        first = ordered[0]
        last = ordered[-1]
        years_span = last.census_year - first.census_year

        if years_span != 0 and first.population > 0:
            annual_growth_rate = (last.population / first.population) ** (1.0 / years_span) - 1
        else:
            annual_growth_rate = 0.0

        horizon = max(0, int(horizon))
        series: list[ProjectionPoint] = []
        previous = last.population
        for offset in range(1, horizon + 1):
            projected = round_half_up(previous * (1 + annual_growth_rate))
            series.append(ProjectionPoint(year=last.census_year + offset, projected=projected))
            previous = projected

        return PopulationProjection(
            base_year=last.census_year,
            projection_years=horizon,
            annual_growth_rate=annual_growth_rate,
            projected_population=series[-1].projected if series else None,
            series=tuple(series),
        )


def compute_projection(
    trend: Sequence[PopulationTrendRow],
    projection_years: int = 5,
) -> PopulationProjection | None:
    """Module-level convenience wrapper around :class:`CompoundGrowthProjection`."""
    return CompoundGrowthProjection().forecast(trend, projection_years)
