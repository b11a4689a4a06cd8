"""
app/connectors/census_reports_connector.py

Dataset provider backed by the internal read-only report endpoints.

Independent datasets are fetched concurrently. A failed fetch yields an
empty dataset and never affects its siblings.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

import requests

from app.config import DatasetSourceSettings
from app.connectors.base import BaseConnector
from app.connectors.internal_token import mint_internal_token
from app.domain.census_rows import DATASET_NAMES, DatasetBundle
from app.logging_utils import log_event

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EndpointSpec:
    """
    Path of one report endpoint and which query parameters it accepts.
    """

    path: str
    uses_year: bool
    uses_province: bool


ENDPOINTS: dict[str, EndpointSpec] = {
    "population_by_province": EndpointSpec("/reports/population-by-province", True, True),
    "population_trend": EndpointSpec("/reports/population-trend", False, True),
    "age_structure": EndpointSpec("/reports/age-structure", True, True),
    "sex_ratio": EndpointSpec("/reports/sex-ratio", True, True),
    "urban_rural": EndpointSpec("/reports/urban-rural", True, True),
    "internet_access": EndpointSpec("/reports/internet-access", True, False),
    "internet_trend": EndpointSpec("/reports/internet-trend", False, False),
}


class CensusReportsConnector(BaseConnector):
    """
    Fetches named datasets for a year and optional province.
    """

    def __init__(
        self,
        *,
        settings: DatasetSourceSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(source="census_reports", settings=settings, session=session)
        self._settings = settings

    def fetch_dataset(self, name: str, year: int | None, province: str | None) -> list[Any]:
        """
        Fetch one dataset. Raises ``ConnectorRequestError`` on failure.
        """

        endpoint = ENDPOINTS[name]
        params: dict[str, Any] = {}
        if endpoint.uses_year and year is not None:
            params["year"] = year
        if endpoint.uses_province and province:
            params["province"] = province

        payload = self._get_json(
            f"{self._settings.base_url.rstrip('/')}{endpoint.path}",
            params=params or None,
            headers={"Authorization": f"Bearer {mint_internal_token(self._settings)}"},
        )
        if not isinstance(payload, list):
            logger.warning(
                "Unexpected report payload shape dataset=%s type=%s",
                name,
                type(payload).__name__,
            )
            return []
        return payload

    def _fetch_or_empty(self, name: str, year: int | None, province: str | None) -> list[Any]:
        try:
            return self.fetch_dataset(name, year, province)
        except Exception as exc:  # noqa: BLE001
            log_event(
                logger,
                logging.WARNING,
                "dataset_fetch_failed",
                dataset=name,
                year=year,
                province=province,
                error=str(exc),
            )
            return []

    def fetch_datasets(
        self,
        names: Iterable[str],
        year: int | None,
        province: str | None = None,
    ) -> DatasetBundle:
        """
        Fetch *names* in parallel and return them as a typed bundle.

        Every requested dataset is present in the result; failed fetches
        are empty.
        """

        requested = [name for name in dict.fromkeys(names) if name in ENDPOINTS]
        if not requested:
            return DatasetBundle()

        with ThreadPoolExecutor(max_workers=len(requested)) as executor:
            futures = {
                name: executor.submit(self._fetch_or_empty, name, year, province)
                for name in requested
            }
            raw = {name: future.result() for name, future in futures.items()}

        log_event(
            logger,
            logging.INFO,
            "datasets_fetched",
            year=year,
            province=province,
            rows={name: len(rows) for name, rows in raw.items()},
        )
        return DatasetBundle.from_payload(raw, names=requested)


class InlineDatasetSource:
    """
    Wraps datasets supplied in a request body. Nothing is fetched.
    """

    def __init__(self, payload: Mapping[str, Any]) -> None:
        self._payload = payload

    def has(self, name: str) -> bool:
        return isinstance(self._payload.get(name), list)

    def bundle(self, names: Iterable[str] = DATASET_NAMES) -> DatasetBundle:
        return DatasetBundle.from_payload(self._payload, names=names)
