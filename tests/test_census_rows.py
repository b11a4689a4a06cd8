"""
tests/test_census_rows.py

Pytest unit tests for row coercion and the dataset bundle.
"""

from __future__ import annotations

import pytest

from app.domain.census_rows import (
    DATASET_NAMES,
    DatasetBundle,
    InternetAccessRow,
    PopulationTrendRow,
    SexRatioRow,
    as_number,
    parse_rows,
)


class TestAsNumber:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, 0.0),
            ("", 0.0),
            ("abc", 0.0),
            ("NaN", 0.0),
            (float("inf"), 0.0),
            ({"nested": 1}, 0.0),
            ("12.5", 12.5),
            (7, 7.0),
        ],
    )
    def test_coercion(self, value, expected: float) -> None:
        assert as_number(value) == expected


class TestRowParsing:
    def test_missing_fields_default(self) -> None:
        row = InternetAccessRow.from_mapping({"province_code": 1})
        assert row.province_code == "1"
        assert row.province_name == ""
        assert row.household_count == 0.0
        assert row.internet_rate_pct == 0.0

    def test_string_numbers_are_coerced(self) -> None:
        row = PopulationTrendRow.from_mapping({"census_year": "2019", "population": "96208984"})
        assert row.census_year == 2019
        assert row.population == 96208984.0

    def test_sex_code_is_upper_cased(self) -> None:
        assert SexRatioRow.from_mapping({"sex": "m", "population": 1}).sex == "M"

    def test_non_list_dataset_is_empty(self) -> None:
        assert parse_rows("population_trend", None) == ()
        assert parse_rows("population_trend", {"census_year": 2019}) == ()

    def test_non_object_rows_are_dropped(self) -> None:
        rows = parse_rows("population_trend", [{"census_year": 2019, "population": 1}, "junk", 3])
        assert len(rows) == 1


class TestDatasetBundle:
    def test_absent_datasets_are_empty_tuples(self) -> None:
        bundle = DatasetBundle.from_payload({"population_trend": [{"census_year": 2019}]})
        for name in DATASET_NAMES:
            assert getattr(bundle, name) is not None
        assert bundle.internet_access == ()
        assert bundle.names_present() == ["population_trend"]

    def test_raw_rows_are_kept_for_requested_names(self) -> None:
        payload = {"urban_rural": [{"area_type": "Thành thị"}], "internet_access": [{}]}
        bundle = DatasetBundle.from_payload(payload, names=("urban_rural",))
        assert bundle.raw == {"urban_rural": [{"area_type": "Thành thị"}]}
        assert bundle.internet_access == ()

    def test_none_payload(self) -> None:
        assert DatasetBundle.from_payload(None) == DatasetBundle(raw={name: [] for name in DATASET_NAMES})

    def test_bundle_is_frozen(self) -> None:
        bundle = DatasetBundle()
        with pytest.raises((AttributeError, TypeError)):
            bundle.urban_rural = ()  # type: ignore[misc]
