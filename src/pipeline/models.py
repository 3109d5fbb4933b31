"""
Value types shared by every stage of the dashboard pipeline.

All types are frozen dataclasses: a Dataset is replaced wholesale on each
successful ingestion and a Selection is replaced on each user event, so no
stage ever mutates state owned by another.

Schema of the environmental table (one row per country-year):

    Country                        - string
    Year                           - int
    Avg_Temperature_degC           - float
    CO2_Emissions_tons_per_capita  - float
    Sea_Level_Rise_mm              - float
    Rainfall_mm                    - float
    Population                     - float
    Renewable_Energy_pct           - float
    Extreme_Weather_Events         - float
    Forest_Area_pct                - float
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

COUNTRY_COLUMN = "Country"
YEAR_COLUMN = "Year"

# CSV column name -> EnvironmentRecord attribute
METRIC_COLUMNS: Dict[str, str] = {
    "Avg_Temperature_degC": "avg_temperature_degc",
    "CO2_Emissions_tons_per_capita": "co2_emissions_tons_per_capita",
    "Sea_Level_Rise_mm": "sea_level_rise_mm",
    "Rainfall_mm": "rainfall_mm",
    "Population": "population",
    "Renewable_Energy_pct": "renewable_energy_pct",
    "Extreme_Weather_Events": "extreme_weather_events",
    "Forest_Area_pct": "forest_area_pct",
}

SCHEMA_COLUMNS: Tuple[str, ...] = (COUNTRY_COLUMN, YEAR_COLUMN, *METRIC_COLUMNS)

NAN = float("nan")


def is_finite(value: Any) -> bool:
    """True for real numbers that are neither NaN nor infinite."""
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except TypeError:
        return False


@dataclass(frozen=True)
class EnvironmentRecord:
    """One normalized country-year observation."""

    country: str
    year: Optional[int]
    avg_temperature_degc: float = NAN
    co2_emissions_tons_per_capita: float = NAN
    sea_level_rise_mm: float = NAN
    rainfall_mm: float = NAN
    population: float = NAN
    renewable_energy_pct: float = NAN
    extreme_weather_events: float = NAN
    forest_area_pct: float = NAN
    # Columns outside the fixed schema, kept verbatim for display.
    extras: Dict[str, Optional[str]] = field(default_factory=dict, compare=False)

    def metric(self, name: str) -> float:
        """
        Return a metric by CSV column name ("Population") or attribute
        name ("population").
        """
        attr = METRIC_COLUMNS.get(name, name)
        if attr not in METRIC_COLUMNS.values():
            raise KeyError(f"Unknown metric: {name!r}")
        return getattr(self, attr)

    def to_dict(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            COUNTRY_COLUMN: self.country,
            YEAR_COLUMN: self.year,
        }
        for column, attr in METRIC_COLUMNS.items():
            row[column] = getattr(self, attr)
        row.update(self.extras)
        return row


@dataclass(frozen=True)
class Dataset:
    """Ordered records from the most recent successful ingestion."""

    records: Tuple[EnvironmentRecord, ...] = ()
    columns: Tuple[str, ...] = ()
    source_label: str = ""

    @property
    def record_count(self) -> int:
        return len(self.records)

    @property
    def metric_count(self) -> int:
        return len(self.columns)

    @property
    def is_empty(self) -> bool:
        return not self.records


@dataclass(frozen=True)
class DomainIndex:
    """Distinct countries (locale-aware order) and years (ascending)."""

    countries: Tuple[str, ...] = ()
    years: Tuple[int, ...] = ()


@dataclass(frozen=True)
class Selection:
    """Current country/year filter; empty country and None year when unset."""

    country: str = ""
    year: Optional[int] = None


__all__ = [
    "COUNTRY_COLUMN",
    "YEAR_COLUMN",
    "METRIC_COLUMNS",
    "SCHEMA_COLUMNS",
    "NAN",
    "is_finite",
    "EnvironmentRecord",
    "Dataset",
    "DomainIndex",
    "Selection",
]
