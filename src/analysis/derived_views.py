"""
Derived views over the active dataset and the resolved selection.

Each view is a pure function of (records, selection) and can be computed
and tested on its own:

- current_record            : the row matching (country, year); first wins
- country_time_series       : rows of the selected country, ascending year
- year_cross_section        : rows of the selected year where the compared
                              metrics (CO2 per capita, renewable share) are
                              both finite
- global_yearly_aggregate   : mean of one metric per year over all
                              countries (finite values only), rounded
- top_n_ranking             : cross-section sorted descending by one field

DerivedViewEngine wraps these with per-view memoization. A cached view is
reused only while the records object is the same one (identity) and the
selection parts it depends on are equal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Iterable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from pipeline.models import EnvironmentRecord, Selection, is_finite

CROSS_SECTION_FIELDS: Tuple[str, str] = (
    "CO2_Emissions_tons_per_capita",
    "Renewable_Energy_pct",
)
RANKING_FIELD = "Population"
AGGREGATE_METRIC = "Sea_Level_Rise_mm"

Records = Sequence[EnvironmentRecord]


@dataclass(frozen=True)
class YearlyMean:
    year: int
    value: float
    # Number of finite values averaged; 0 means the value is the 0.0 placeholder.
    contributors: int


@dataclass(frozen=True)
class DerivedViews:
    selection: Selection
    current_record: Optional[EnvironmentRecord]
    country_series: Tuple[EnvironmentRecord, ...]
    cross_section: Tuple[EnvironmentRecord, ...]
    global_aggregate: Tuple[YearlyMean, ...]
    ranking: Tuple[EnvironmentRecord, ...]


def current_record(records: Records, selection: Selection) -> Optional[EnvironmentRecord]:
    """First record matching the selected country and year, if any."""
    if not selection.country or selection.year is None:
        return None
    for record in records:
        if record.country == selection.country and record.year == selection.year:
            return record
    return None


def country_time_series(records: Records, country: str) -> Tuple[EnvironmentRecord, ...]:
    """
    Records of `country` sorted by year (stable; rows without a year last).
    """
    if not country:
        return ()
    rows = [r for r in records if r.country == country]
    rows.sort(key=lambda r: (r.year is None, r.year if r.year is not None else 0))
    return tuple(rows)


def year_cross_section(
    records: Records,
    year: Optional[int],
    *,
    fields: Iterable[str] = CROSS_SECTION_FIELDS,
) -> Tuple[EnvironmentRecord, ...]:
    if year is None:
        return ()
    fields = tuple(fields)
    return tuple(
        r
        for r in records
        if r.year == year and all(is_finite(r.metric(f)) for f in fields)
    )


def global_yearly_aggregate(
    records: Records,
    metric: str,
    *,
    decimals: int = 2,
) -> Tuple[YearlyMean, ...]:
    """
    Mean of `metric` per year across all countries.

    Non-finite values are left out of the mean. A year whose values are all
    non-finite is still reported, with value 0.0 and contributors=0.
    Records without a year are ignored.
    """
    frame = pd.DataFrame(
        {
            "year": [r.year for r in records],
            "value": [r.metric(metric) for r in records],
        },
        columns=["year", "value"],
    )
    frame = frame[frame["year"].notna()]
    if frame.empty:
        return ()

    frame = frame.assign(
        year=frame["year"].astype("int64"),
        value=pd.to_numeric(frame["value"], errors="coerce").replace([np.inf, -np.inf], np.nan),
    )
    grouped = frame.groupby("year", sort=True)["value"].agg(["mean", "count"])

    points = []
    for year, row in grouped.iterrows():
        count = int(row["count"])
        value = round(float(row["mean"]), decimals) if count else 0.0
        points.append(YearlyMean(year=int(year), value=value, contributors=count))
    return tuple(points)


def top_n_ranking(
    cross_section: Records,
    field: str,
    n: int,
) -> Tuple[EnvironmentRecord, ...]:
    """
    The `n` records with the highest `field`, descending.

    Rows where `field` is not finite are excluded. Ties keep the original
    dataset order.
    """
    if n <= 0:
        return ()
    candidates = [r for r in cross_section if is_finite(r.metric(field))]
    # sorted() is stable, so equal values stay in input order.
    ranked = sorted(candidates, key=lambda r: r.metric(field), reverse=True)
    return tuple(ranked[:n])


class DerivedViewEngine:
    """
    Memoizing front-end for the derived views.

    Cache entries are keyed by view name and invalidated when the records
    object changes (identity) or any dependency value changes.
    """

    def __init__(
        self,
        *,
        top_n: int = 8,
        aggregate_decimals: int = 2,
        ranking_field: str = RANKING_FIELD,
        aggregate_metric: str = AGGREGATE_METRIC,
        cross_section_fields: Iterable[str] = CROSS_SECTION_FIELDS,
    ) -> None:
        self.top_n = top_n
        self.aggregate_decimals = aggregate_decimals
        self.ranking_field = ranking_field
        self.aggregate_metric = aggregate_metric
        self.cross_section_fields = tuple(cross_section_fields)
        self._cache: Dict[Hashable, Tuple[Any, Tuple[Any, ...], Any]] = {}

    @classmethod
    def from_settings(cls, settings: Any) -> "DerivedViewEngine":
        return cls(top_n=settings.top_n, aggregate_decimals=settings.aggregate_decimals)

    def clear(self) -> None:
        self._cache.clear()

    def _memo(
        self,
        name: Hashable,
        records: Records,
        deps: Tuple[Any, ...],
        compute: Callable[[], Any],
    ) -> Any:
        cached = self._cache.get(name)
        if cached is not None:
            cached_records, cached_deps, value = cached
            if cached_records is records and cached_deps == deps:
                return value
        value = compute()
        self._cache[name] = (records, deps, value)
        return value

    def current_record(self, records: Records, selection: Selection) -> Optional[EnvironmentRecord]:
        return self._memo(
            "current_record",
            records,
            (selection.country, selection.year),
            lambda: current_record(records, selection),
        )

    def country_time_series(self, records: Records, selection: Selection) -> Tuple[EnvironmentRecord, ...]:
        return self._memo(
            "country_series",
            records,
            (selection.country,),
            lambda: country_time_series(records, selection.country),
        )

    def year_cross_section(self, records: Records, selection: Selection) -> Tuple[EnvironmentRecord, ...]:
        return self._memo(
            "cross_section",
            records,
            (selection.year, self.cross_section_fields),
            lambda: year_cross_section(records, selection.year, fields=self.cross_section_fields),
        )

    def global_yearly_aggregate(self, records: Records, metric: Optional[str] = None) -> Tuple[YearlyMean, ...]:
        metric = metric or self.aggregate_metric
        return self._memo(
            ("global_aggregate", metric),
            records,
            (self.aggregate_decimals,),
            lambda: global_yearly_aggregate(records, metric, decimals=self.aggregate_decimals),
        )

    def top_n_ranking(
        self,
        records: Records,
        selection: Selection,
        field: Optional[str] = None,
        n: Optional[int] = None,
    ) -> Tuple[EnvironmentRecord, ...]:
        field = field or self.ranking_field
        n = self.top_n if n is None else n
        cross_section = self.year_cross_section(records, selection)
        return self._memo(
            ("ranking", field),
            records,
            (selection.year, self.cross_section_fields, n),
            lambda: top_n_ranking(cross_section, field, n),
        )

    def compute(self, records: Records, selection: Selection) -> DerivedViews:
        """All views for one (records, selection) pair."""
        return DerivedViews(
            selection=selection,
            current_record=self.current_record(records, selection),
            country_series=self.country_time_series(records, selection),
            cross_section=self.year_cross_section(records, selection),
            global_aggregate=self.global_yearly_aggregate(records),
            ranking=self.top_n_ranking(records, selection),
        )


__all__ = [
    "CROSS_SECTION_FIELDS",
    "RANKING_FIELD",
    "AGGREGATE_METRIC",
    "YearlyMean",
    "DerivedViews",
    "current_record",
    "country_time_series",
    "year_cross_section",
    "global_yearly_aggregate",
    "top_n_ranking",
    "DerivedViewEngine",
]
