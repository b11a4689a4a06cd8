"""
tests/conftest.py

Shared fakes for service, graph and API tests.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import pytest

from app.config import ReportDefaults
from app.domain.census_rows import DatasetBundle
from app.services.report_service import ReportService
from llm_synthesis.adapter import MockLLMAdapter


class FakeDatasetProvider:
    """Stands in for ``CensusReportsConnector``; serves canned rows."""

    def __init__(self, datasets: Mapping[str, Any] | None = None) -> None:
        self._datasets = dict(datasets or {})
        self.calls: list[dict[str, Any]] = []

    def fetch_datasets(self, names: Iterable[str], year: int | None, province: str | None = None) -> DatasetBundle:
        names = tuple(names)
        self.calls.append({"names": names, "year": year, "province": province})
        return DatasetBundle.from_payload(self._datasets, names=names)


@pytest.fixture()
def make_provider() -> type[FakeDatasetProvider]:
    return FakeDatasetProvider


@pytest.fixture()
def provider() -> FakeDatasetProvider:
    return FakeDatasetProvider(
        {
            "population_trend": [
                {"census_year": 2009, "population": 90_000_000},
                {"census_year": 2019, "population": 96_000_000},
            ],
            "urban_rural": [
                {"area_type": "Thành thị", "population": 400, "household_count": 100},
                {"area_type": "Nông thôn", "population": 600, "household_count": 300},
            ],
            "internet_access": [{"province_code": "01", "household_count": 10, "households_with_internet": 5}],
        }
    )


@pytest.fixture()
def adapter() -> MockLLMAdapter:
    return MockLLMAdapter(response="Báo cáo dạng văn bản thuần.")


@pytest.fixture()
def service(provider: FakeDatasetProvider, adapter: MockLLMAdapter) -> ReportService:
    return ReportService(provider=provider, adapter=adapter, defaults=ReportDefaults())
