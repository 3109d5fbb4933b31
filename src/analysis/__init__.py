"""
Analysis layer
--------------

Derived views over the active dataset (snapshot, time series,
cross-section, global aggregate, ranking), the chart payloads built from
them, and optional file exports:

- <country>_trend.png
- ranking_summary.csv / ranking_summary.xlsx

`analysis.exports` imports matplotlib and is not loaded here.
"""

from .derived_views import (  # noqa: F401
    AGGREGATE_METRIC,
    CROSS_SECTION_FIELDS,
    RANKING_FIELD,
    DerivedViewEngine,
    DerivedViews,
    YearlyMean,
    country_time_series,
    current_record,
    global_yearly_aggregate,
    top_n_ranking,
    year_cross_section,
)
from .highlights import (  # noqa: F401
    HighlightStat,
    MetricProfile,
    ScatterPoint,
    TrendSeries,
    format_integer,
    format_number,
    highlight_stats,
    metric_profile,
    renewable_split,
    scatter_points,
)

__all__ = [
    "AGGREGATE_METRIC",
    "CROSS_SECTION_FIELDS",
    "RANKING_FIELD",
    "DerivedViewEngine",
    "DerivedViews",
    "YearlyMean",
    "current_record",
    "country_time_series",
    "year_cross_section",
    "global_yearly_aggregate",
    "top_n_ranking",
    "HighlightStat",
    "MetricProfile",
    "ScatterPoint",
    "TrendSeries",
    "format_number",
    "format_integer",
    "highlight_stats",
    "metric_profile",
    "renewable_split",
    "scatter_points",
]
