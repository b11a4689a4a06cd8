"""
tests/test_projection.py

Pytest unit tests for the compound-growth population projection.

Coverage
--------
- Growth rate formula over the sorted trend
- Step-by-step compounding with half-up rounding
- Fewer than two points returns None
- Zero year span and non-positive first value give a 0 rate
- Unsorted input
- as_dict serialisation shape
"""

from __future__ import annotations

import pytest

from app.domain.census_rows import PopulationTrendRow
from forecast.projection import (
    CompoundGrowthProjection,
    PopulationProjection,
    compute_projection,
    round_half_up,
)


def _trend(*points: tuple[int, float]) -> list[PopulationTrendRow]:
    return [PopulationTrendRow(census_year=year, population=population) for year, population in points]


# ---------------------------------------------------------------------------
# Growth rate
# ---------------------------------------------------------------------------


class TestGrowthRate:
    def test_rate_matches_formula(self) -> None:
        projection = compute_projection(_trend((2009, 90_000_000), (2019, 96_000_000)), 3)
        assert projection is not None
        assert projection.annual_growth_rate == pytest.approx((96 / 90) ** (1 / 10) - 1)
        assert projection.annual_growth_rate == pytest.approx(0.00642, abs=1e-5)

    def test_unsorted_trend_is_sorted_by_year(self) -> None:
        ordered = compute_projection(_trend((2009, 90_000_000), (2019, 96_000_000)), 2)
        shuffled = compute_projection(_trend((2019, 96_000_000), (2009, 90_000_000)), 2)
        assert ordered == shuffled

    def test_intermediate_points_do_not_change_rate(self) -> None:
        projection = compute_projection(
            _trend((1999, 76_000_000), (2009, 90_000_000), (2019, 96_000_000)), 1
        )
        assert projection is not None
        assert projection.annual_growth_rate == pytest.approx((96 / 76) ** (1 / 20) - 1)

    def test_zero_year_span_gives_zero_rate(self) -> None:
        projection = compute_projection(_trend((2019, 90), (2019, 96)), 2)
        assert projection is not None
        assert projection.annual_growth_rate == 0.0
        assert [point.projected for point in projection.series] == [96, 96]

    def test_non_positive_first_value_gives_zero_rate(self) -> None:
        projection = compute_projection(_trend((2009, 0), (2019, 96)), 1)
        assert projection is not None
        assert projection.annual_growth_rate == 0.0


# ---------------------------------------------------------------------------
# Series
# ---------------------------------------------------------------------------


class TestSeries:
    def test_three_year_series_compounds_from_last_value(self) -> None:
        projection = compute_projection(_trend((2009, 90_000_000), (2019, 96_000_000)), 3)
        assert projection is not None

        rate = (96 / 90) ** (1 / 10) - 1
        expected = []
        previous = 96_000_000
        for _ in range(3):
            previous = round_half_up(previous * (1 + rate))
            expected.append(previous)

        assert [point.year for point in projection.series] == [2020, 2021, 2022]
        assert [point.projected for point in projection.series] == expected
        assert projection.projected_population == expected[-1]
        assert projection.base_year == 2019
        assert projection.projection_years == 3

    def test_zero_horizon_has_empty_series(self) -> None:
        projection = compute_projection(_trend((2009, 90), (2019, 96)), 0)
        assert projection is not None
        assert projection.series == ()
        assert projection.projected_population is None

    def test_negative_horizon_is_treated_as_zero(self) -> None:
        projection = CompoundGrowthProjection().forecast(_trend((2009, 90), (2019, 96)), -4)
        assert projection is not None
        assert projection.projection_years == 0


# ---------------------------------------------------------------------------
# Insufficient data
# ---------------------------------------------------------------------------


class TestNoProjection:
    @pytest.mark.parametrize("points", [(), ((2019, 96_000_000),)])
    def test_fewer_than_two_points_returns_none(self, points) -> None:
        assert compute_projection(_trend(*points), 5) is None


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value, expected",
        [(0.5, 1), (1.5, 2), (2.5, 3), (2.4999, 2), (10.0, 10)],
    )
    def test_halves_round_up(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected


class TestSerialisation:
    def test_as_dict_shape(self) -> None:
        projection = PopulationProjection(
            base_year=2019,
            projection_years=1,
            annual_growth_rate=0.01,
            projected_population=101,
            series=(),
        )
        payload = projection.as_dict()
        assert set(payload) == {
            "base_year",
            "projection_years",
            "annual_growth_rate",
            "projected_population",
            "series",
        }
        assert payload["series"] == []
