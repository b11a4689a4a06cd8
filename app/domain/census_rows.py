"""
app/domain/census_rows.py

Typed census rows and the per-request dataset bundle.

Raw report endpoint rows are loosely typed JSON objects. Every numeric
field is coerced exactly once here (missing, invalid and non-finite values
become 0) so aggregation code never re-checks for absence.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

DATASET_NAMES: tuple[str, ...] = (
    "population_by_province",
    "population_trend",
    "age_structure",
    "sex_ratio",
    "urban_rural",
    "internet_access",
    "internet_trend",
)

TOPIC_DATASETS: dict[str, tuple[str, ...]] = {
    "population": ("population_by_province", "population_trend", "age_structure", "sex_ratio"),
    "urban_rural": ("urban_rural",),
    "internet": ("internet_access", "internet_trend"),
}


def as_number(value: Any) -> float:
    """Coerce a scalar into a finite float, falling back to 0."""
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def as_year(value: Any) -> int:
    return int(as_number(value))


def as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class PopulationByProvinceRow:
    census_year: int
    province_code: str
    province_name: str
    population: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "PopulationByProvinceRow":
        return cls(
            census_year=as_year(raw.get("census_year")),
            province_code=as_text(raw.get("province_code")),
            province_name=as_text(raw.get("province_name")),
            population=as_number(raw.get("population")),
        )


@dataclass(frozen=True)
class PopulationTrendRow:
    census_year: int
    population: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "PopulationTrendRow":
        return cls(
            census_year=as_year(raw.get("census_year")),
            population=as_number(raw.get("population")),
        )


@dataclass(frozen=True)
class AgeStructureRow:
    census_year: int
    province_code: str
    province_name: str
    age_group: str
    population: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "AgeStructureRow":
        return cls(
            census_year=as_year(raw.get("census_year")),
            province_code=as_text(raw.get("province_code")),
            province_name=as_text(raw.get("province_name")),
            age_group=as_text(raw.get("age_group")),
            population=as_number(raw.get("population")),
        )


@dataclass(frozen=True)
class SexRatioRow:
    census_year: int
    province_code: str
    province_name: str
    sex: str
    population: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "SexRatioRow":
        return cls(
            census_year=as_year(raw.get("census_year")),
            province_code=as_text(raw.get("province_code")),
            province_name=as_text(raw.get("province_name")),
            sex=as_text(raw.get("sex")).upper(),
            population=as_number(raw.get("population")),
        )


@dataclass(frozen=True)
class UrbanRuralRow:
    """
    One area-type slice. ``area_type`` stays empty when the source omits it;
    the aggregator maps empty keys to its "other" group.
    """

    census_year: int
    province_code: str
    province_name: str
    area_type: str
    population: float
    household_count: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "UrbanRuralRow":
        return cls(
            census_year=as_year(raw.get("census_year")),
            province_code=as_text(raw.get("province_code")),
            province_name=as_text(raw.get("province_name")),
            area_type=as_text(raw.get("area_type")),
            population=as_number(raw.get("population")),
            household_count=as_number(raw.get("household_count")),
        )


@dataclass(frozen=True)
class InternetAccessRow:
    census_year: int
    province_code: str
    province_name: str
    household_count: float
    households_with_internet: float
    internet_rate_pct: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "InternetAccessRow":
        return cls(
            census_year=as_year(raw.get("census_year")),
            province_code=as_text(raw.get("province_code")),
            province_name=as_text(raw.get("province_name")),
            household_count=as_number(raw.get("household_count")),
            households_with_internet=as_number(raw.get("households_with_internet")),
            internet_rate_pct=as_number(raw.get("internet_rate_pct")),
        )


@dataclass(frozen=True)
class InternetTrendRow:
    census_year: int
    household_count: float
    households_with_internet: float
    internet_rate_pct: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "InternetTrendRow":
        return cls(
            census_year=as_year(raw.get("census_year")),
            household_count=as_number(raw.get("household_count")),
            households_with_internet=as_number(raw.get("households_with_internet")),
            internet_rate_pct=as_number(raw.get("internet_rate_pct")),
        )


_ROW_TYPES: dict[str, Any] = {
    "population_by_province": PopulationByProvinceRow,
    "population_trend": PopulationTrendRow,
    "age_structure": AgeStructureRow,
    "sex_ratio": SexRatioRow,
    "urban_rural": UrbanRuralRow,
    "internet_access": InternetAccessRow,
    "internet_trend": InternetTrendRow,
}


def parse_rows(dataset_name: str, raw_rows: Any) -> tuple[Any, ...]:
    """
    Convert one raw dataset into typed rows.

    Anything that is not a list yields an empty dataset; non-object entries
    are dropped with a warning.
    """

    row_type = _ROW_TYPES[dataset_name]
    if not isinstance(raw_rows, (list, tuple)):
        return ()

    rows = []
    for index, raw in enumerate(raw_rows):
        if not isinstance(raw, Mapping):
            logger.warning(
                "Dropping non-object row dataset=%s index=%s type=%s",
                dataset_name,
                index,
                type(raw).__name__,
            )
            continue
        rows.append(row_type.from_mapping(raw))
    return tuple(rows)


@dataclass(frozen=True)
class DatasetBundle:
    """
    Every dataset a request can touch. Absent datasets are empty tuples.

    ``raw`` keeps the untyped payload per dataset name for prompt excerpts.
    """

    population_by_province: tuple[PopulationByProvinceRow, ...] = ()
    population_trend: tuple[PopulationTrendRow, ...] = ()
    age_structure: tuple[AgeStructureRow, ...] = ()
    sex_ratio: tuple[SexRatioRow, ...] = ()
    urban_rural: tuple[UrbanRuralRow, ...] = ()
    internet_access: tuple[InternetAccessRow, ...] = ()
    internet_trend: tuple[InternetTrendRow, ...] = ()
    raw: Mapping[str, list[Any]] = field(default_factory=dict)

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any] | None,
        names: Iterable[str] = DATASET_NAMES,
    ) -> "DatasetBundle":
        """
        Build a bundle from a mapping of dataset name to raw rows.

        Only ``names`` are read; unknown keys in ``payload`` are ignored.
        """

        payload = payload or {}
        typed: dict[str, tuple[Any, ...]] = {}
        raw: dict[str, list[Any]] = {}
        for name in names:
            if name not in _ROW_TYPES:
                continue
            value = payload.get(name)
            typed[name] = parse_rows(name, value)
            raw[name] = list(value) if isinstance(value, (list, tuple)) else []
        return cls(**typed, raw=raw)

    def names_present(self) -> list[str]:
        return [name for name in DATASET_NAMES if getattr(self, name)]
