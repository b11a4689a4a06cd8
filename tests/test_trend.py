"""
tests/test_trend.py

Pytest unit tests for trend direction classification and summarization.
"""

from __future__ import annotations

import pytest

from app.domain.census_rows import InternetTrendRow
from forecast.classifier import (
    MILD_DECREASE,
    MILD_INCREASE,
    STABLE,
    STRONG_DECREASE,
    STRONG_INCREASE,
    TrendClassifier,
)
from forecast.trend import summarize_trend


def _point(year: int, rate: float = 0.0, households: float = 0.0, with_internet: float = 0.0) -> InternetTrendRow:
    return InternetTrendRow(
        census_year=year,
        household_count=households,
        households_with_internet=with_internet,
        internet_rate_pct=rate,
    )


class TestTrendClassifier:
    @pytest.mark.parametrize(
        "delta, expected",
        [
            (6, STRONG_INCREASE),
            (2, MILD_INCREASE),
            (0, STABLE),
            (-6, STRONG_DECREASE),
            (-2, MILD_DECREASE),
        ],
    )
    def test_reference_deltas(self, delta: float, expected: str) -> None:
        assert TrendClassifier().classify(delta) == expected

    @pytest.mark.parametrize(
        "delta, expected",
        [
            (5, MILD_INCREASE),
            (1, STABLE),
            (-1, STABLE),
            (-5, MILD_DECREASE),
        ],
    )
    def test_boundaries_resolve_to_weaker_label(self, delta: float, expected: str) -> None:
        assert TrendClassifier().classify(delta) == expected


class TestSummarizeTrend:
    def test_fewer_than_two_points_returns_none(self) -> None:
        assert summarize_trend([]) is None
        assert summarize_trend([_point(2019, 60.0)]) is None

    def test_uses_first_and_last_after_sorting(self) -> None:
        summary = summarize_trend([_point(2019, 70.0), _point(2009, 40.0), _point(2014, 55.0)])
        assert summary is not None
        assert summary.first_year == 2009
        assert summary.last_year == 2019
        assert summary.change == pytest.approx(30.0)
        assert summary.avg_change_per_year == pytest.approx(15.0)
        assert summary.direction == STRONG_INCREASE

    def test_two_points_average_equals_delta(self) -> None:
        summary = summarize_trend([_point(2009, 50.0), _point(2019, 52.0)])
        assert summary is not None
        assert summary.avg_change_per_year == pytest.approx(summary.change)
        assert summary.direction == MILD_INCREASE

    def test_missing_rate_is_derived_from_counts(self) -> None:
        summary = summarize_trend(
            [
                _point(2009, households=200, with_internet=50),
                _point(2019, households=200, with_internet=60),
            ]
        )
        assert summary is not None
        assert summary.first_rate == pytest.approx(25.0)
        assert summary.last_rate == pytest.approx(30.0)
        assert summary.direction == MILD_INCREASE
