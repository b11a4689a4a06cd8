"""
tests/test_census_reports_connector.py

Pytest unit tests for the census report dataset provider.

No network: a fake ``requests.Session`` answers by URL path.
"""

from __future__ import annotations

import threading
from typing import Any

import pytest
import requests

from app.config import DatasetSourceSettings
from app.connectors.base import BaseConnector, ConnectorRequestError, RetryPolicy
from app.connectors.census_reports_connector import CensusReportsConnector, InlineDatasetSource
from app.connectors.internal_token import decode_token

_SETTINGS = DatasetSourceSettings(
    base_url="http://reports.test/api",
    timeout_seconds=2.0,
    max_retries=0,
    token_secret="test-secret",
)


class _FakeResponse:
    def __init__(self, status_code: int, payload: Any) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}", response=self)


class _FakeSession:
    def __init__(self, routes: dict[str, Any]) -> None:
        self._routes = routes
        self._lock = threading.Lock()
        self.calls: list[dict[str, Any]] = []

    def request(self, *, method: str, url: str, params=None, headers=None, timeout=None) -> _FakeResponse:
        with self._lock:
            self.calls.append({"method": method, "url": url, "params": params, "headers": headers})
        path = url.removeprefix(_SETTINGS.base_url)
        route = self._routes.get(path)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, _FakeResponse):
            return route
        return _FakeResponse(200, route if route is not None else [])


def _connector(routes: dict[str, Any]) -> tuple[CensusReportsConnector, _FakeSession]:
    session = _FakeSession(routes)
    return CensusReportsConnector(settings=_SETTINGS, session=session), session


class TestFetchDataset:
    def test_query_parameters_follow_endpoint_table(self) -> None:
        connector, session = _connector({})
        connector.fetch_datasets(
            ("population_by_province", "population_trend", "internet_access", "internet_trend"),
            2019,
            "01",
        )
        params = {call["url"].rsplit("/", 1)[-1]: call["params"] for call in session.calls}
        assert params["population-by-province"] == {"year": 2019, "province": "01"}
        assert params["population-trend"] == {"province": "01"}
        assert params["internet-access"] == {"year": 2019}
        assert params["internet-trend"] is None

    def test_each_call_carries_a_fresh_bearer_token(self) -> None:
        connector, session = _connector({})
        connector.fetch_dataset("urban_rural", 2019, None)
        header = session.calls[0]["headers"]["Authorization"]
        assert header.startswith("Bearer ")
        claims = decode_token(header.removeprefix("Bearer "), "test-secret")
        assert claims["service"] == _SETTINGS.token_service_name
        assert claims["exp"] - claims["iat"] == _SETTINGS.token_ttl_seconds

    def test_non_list_payload_is_empty(self) -> None:
        connector, _ = _connector({"/reports/urban-rural": {"rows": []}})
        assert connector.fetch_dataset("urban_rural", 2019, None) == []

    def test_http_error_raises(self) -> None:
        connector, _ = _connector({"/reports/urban-rural": _FakeResponse(404, [])})
        with pytest.raises(ConnectorRequestError):
            connector.fetch_dataset("urban_rural", 2019, None)


class TestFetchDatasets:
    def test_partial_failure_yields_empty_dataset(self) -> None:
        connector, _ = _connector(
            {
                "/reports/population-by-province": [
                    {"province_code": "01", "province_name": "Hà Nội", "population": 8_000_000}
                ],
                "/reports/population-trend": requests.ConnectionError("down"),
                "/reports/age-structure": _FakeResponse(500, []),
                "/reports/sex-ratio": _FakeResponse(200, ValueError("not json")),
            }
        )
        bundle = connector.fetch_datasets(
            ("population_by_province", "population_trend", "age_structure", "sex_ratio"),
            2019,
        )
        assert len(bundle.population_by_province) == 1
        assert bundle.population_trend == ()
        assert bundle.age_structure == ()
        assert bundle.sex_ratio == ()
        assert set(bundle.raw) == {"population_by_province", "population_trend", "age_structure", "sex_ratio"}

    def test_unknown_and_duplicate_names_are_ignored(self) -> None:
        connector, session = _connector({})
        connector.fetch_datasets(("urban_rural", "urban_rural", "not_a_dataset"), 2019)
        assert len(session.calls) == 1

    def test_nothing_requested(self) -> None:
        connector, session = _connector({})
        assert connector.fetch_datasets((), 2019).names_present() == []
        assert session.calls == []


class TestInlineDatasetSource:
    def test_has_requires_a_list(self) -> None:
        source = InlineDatasetSource({"urban_rural": [], "internet_access": {"x": 1}})
        assert source.has("urban_rural")
        assert not source.has("internet_access")
        assert not source.has("sex_ratio")

    def test_bundle_uses_rows_verbatim(self) -> None:
        rows = [{"area_type": "Nông thôn", "population": "10"}]
        bundle = InlineDatasetSource({"urban_rural": rows}).bundle(("urban_rural",))
        assert bundle.urban_rural[0].population == 10.0
        assert bundle.raw["urban_rural"] == rows


class _SequenceSession:
    def __init__(self, outcomes: list[Any]) -> None:
        self._outcomes = list(outcomes)
        self.calls = 0

    def request(self, **kwargs: Any) -> _FakeResponse:
        self.calls += 1
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class TestRetryPolicy:
    def test_delay_grows_geometrically(self) -> None:
        policy = RetryPolicy(max_retries=3, initial_delay_seconds=0.5, multiplier=2.0)
        assert [policy.delay_for(n) for n in range(3)] == [0.5, 1.0, 2.0]

    def test_retryable_status_then_success(self) -> None:
        settings = DatasetSourceSettings(base_url="http://reports.test/api", max_retries=2)
        session = _SequenceSession([requests.Timeout("slow"), _FakeResponse(503, []), _FakeResponse(200, [1])])
        waits: list[float] = []
        connector = BaseConnector(source="test", settings=settings, session=session, sleep=waits.append)
        assert connector._get_json("http://reports.test/api/x") == [1]
        assert session.calls == 3
        assert waits == [0.5, 1.0]

    def test_gives_up_after_max_retries(self) -> None:
        settings = DatasetSourceSettings(base_url="http://reports.test/api", max_retries=1)
        session = _SequenceSession([_FakeResponse(500, []), _FakeResponse(502, [])])
        connector = BaseConnector(source="test", settings=settings, session=session, sleep=lambda _: None)
        with pytest.raises(ConnectorRequestError) as excinfo:
            connector._get_json("http://reports.test/api/x")
        assert excinfo.value.status_code == 502
        assert session.calls == 2

    def test_client_error_is_not_retried(self) -> None:
        settings = DatasetSourceSettings(base_url="http://reports.test/api", max_retries=3)
        session = _SequenceSession([_FakeResponse(400, [])])
        connector = BaseConnector(source="test", settings=settings, session=session, sleep=lambda _: None)
        with pytest.raises(ConnectorRequestError):
            connector._get_json("http://reports.test/api/x")
        assert session.calls == 1
