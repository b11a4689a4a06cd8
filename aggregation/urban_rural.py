"""
aggregation/urban_rural.py

Urban/rural population and household aggregation.

Rows are grouped by ``area_type``; each group's share is
``group_total / overall_total * 100`` (0 when the overall total is 0).
Rows without an area type fall into the :data:`OTHER_AREA` group.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from app.domain.census_rows import UrbanRuralRow

OTHER_AREA = "Khác"

URBAN = "urban"
RURAL = "rural"

_AREA_ALIASES: dict[str, tuple[str, ...]] = {
    URBAN: ("do thi", "thanh thi", "urban"),
    RURAL: ("nong thon", "rural"),
}


def fold_text(text: str) -> str:
    """Lower-case and strip diacritics (including the Vietnamese ``đ``)."""
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return stripped.replace("đ", "d")


def classify_area(area_type: str) -> str | None:
    """Return ``"urban"``, ``"rural"`` or ``None`` for an area-type label."""
    folded = fold_text(area_type)
    for area, aliases in _AREA_ALIASES.items():
        if any(alias in folded for alias in aliases):
            return area
    return None


@dataclass(frozen=True)
class AreaGroup:
    area_type: str
    population: float
    household_count: float
    population_percent: float
    household_percent: float


@dataclass(frozen=True)
class UrbanRuralTotals:
    population: float
    households: float


@dataclass(frozen=True)
class UrbanRuralAggregate:
    totals: UrbanRuralTotals
    items: tuple[AreaGroup, ...]


def aggregate_urban_rural(rows: Sequence[UrbanRuralRow]) -> UrbanRuralAggregate:
    """Group rows by area type, keeping groups in first-seen order."""
    population_by_area: dict[str, float] = {}
    households_by_area: dict[str, float] = {}
    total_population = 0.0
    total_households = 0.0

    for row in rows:
        key = row.area_type or OTHER_AREA
        population_by_area[key] = population_by_area.get(key, 0.0) + row.population
        households_by_area[key] = households_by_area.get(key, 0.0) + row.household_count
        total_population += row.population
        total_households += row.household_count

    items = tuple(
        AreaGroup(
            area_type=key,
            population=population_by_area[key],
            household_count=households_by_area[key],
            population_percent=(population_by_area[key] / total_population * 100) if total_population else 0.0,
            household_percent=(households_by_area[key] / total_households * 100) if total_households else 0.0,
        )
        for key in population_by_area
    )

    return UrbanRuralAggregate(
        totals=UrbanRuralTotals(population=total_population, households=total_households),
        items=items,
    )


def _dominant(urban_share: float, rural_share: float, labels: dict[str, str]) -> str:
    if urban_share > rural_share:
        return labels[URBAN]
    if rural_share > urban_share:
        return labels[RURAL]
    return labels["unknown"]


def derive_urban_rural_insights(
    aggregate: UrbanRuralAggregate,
    labels: dict[str, str],
) -> dict[str, Any]:
    """
    Deterministic values for every advertised urban/rural insight field.

    ``labels`` maps ``"urban"``, ``"rural"`` and ``"unknown"`` to the
    display strings used for the dominant-area fields.  Shares are rounded
    to two decimals; a tie (including both zero) is ``unknown``.
    """

    shares = {
        URBAN: {"population": 0.0, "household": 0.0},
        RURAL: {"population": 0.0, "household": 0.0},
    }
    for item in aggregate.items:
        area = classify_area(item.area_type)
        if area is None:
            continue
        shares[area]["population"] += item.population_percent
        shares[area]["household"] += item.household_percent

    return {
        "urban_population_share": round(shares[URBAN]["population"], 2),
        "rural_population_share": round(shares[RURAL]["population"], 2),
        "urban_household_share": round(shares[URBAN]["household"], 2),
        "rural_household_share": round(shares[RURAL]["household"], 2),
        "dominant_area_population": _dominant(
            shares[URBAN]["population"], shares[RURAL]["population"], labels
        ),
        "dominant_area_household": _dominant(
            shares[URBAN]["household"], shares[RURAL]["household"], labels
        ),
    }
