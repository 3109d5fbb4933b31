"""
Chart-ready payloads built from the derived views.

Nothing here draws anything: these are the labelled numbers a renderer
needs for the highlight cards, the trend charts, the metric profile, the
renewable split and the CO2 x renewables scatter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from analysis.derived_views import YearlyMean
from pipeline.models import EnvironmentRecord, is_finite

MISSING_TEXT = "--"

_COMPACT_UNITS = ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K"))


@dataclass(frozen=True)
class HighlightStat:
    label: str
    value: str
    caption: str


@dataclass(frozen=True)
class TrendSeries:
    label: str
    years: Tuple[int, ...]
    values: Tuple[Optional[float], ...]


@dataclass(frozen=True)
class MetricProfile:
    title: str
    labels: Tuple[str, ...]
    values: Tuple[float, ...]


@dataclass(frozen=True)
class ScatterPoint:
    country: str
    co2_tons_per_capita: float
    renewable_energy_pct: float
    population: Optional[float]


def _trim_zero(text: str) -> str:
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_number(value: Optional[float], *, compact: bool = False, suffix: str = "") -> str:
    """
    Format with at most one fraction digit ("12,345.7").

    With compact=True large values use K/M/B/T ("38.2M").
    """
    if not is_finite(value):
        return MISSING_TEXT

    if compact:
        magnitude = abs(value)
        for position, (divisor, unit) in enumerate(_COMPACT_UNITS):
            if magnitude < divisor:
                continue
            scaled = round(value / divisor, 1)
            # 999.96K rounds up to 1000K; promote to the next unit.
            if abs(scaled) >= 1000 and position > 0:
                bigger, bigger_unit = _COMPACT_UNITS[position - 1]
                scaled, unit = round(value / bigger, 1), bigger_unit
            return f"{_trim_zero(f'{scaled:.1f}')}{unit}{suffix}"

    return f"{_trim_zero(f'{value:,.1f}')}{suffix}"


def format_integer(value: Optional[float]) -> str:
    if not is_finite(value):
        return MISSING_TEXT
    return f"{round(value):,}"


def _metric_or_none(record: Optional[EnvironmentRecord], name: str) -> Optional[float]:
    return record.metric(name) if record is not None else None


def highlight_stats(record: Optional[EnvironmentRecord]) -> Tuple[HighlightStat, ...]:
    """The five summary cards for the selected country-year."""
    return (
        HighlightStat(
            label="Average temperature",
            value=format_number(_metric_or_none(record, "Avg_Temperature_degC"), suffix="°C"),
            caption="Surface temperature for the selected country",
        ),
        HighlightStat(
            label="CO₂ per capita",
            value=format_number(
                _metric_or_none(record, "CO2_Emissions_tons_per_capita"), suffix=" t"
            ),
            caption="Annual emissions intensity",
        ),
        HighlightStat(
            label="Renewable energy share",
            value=format_number(_metric_or_none(record, "Renewable_Energy_pct"), suffix="%"),
            caption="Percent of energy from renewables",
        ),
        HighlightStat(
            label="Population exposed",
            value=format_number(_metric_or_none(record, "Population"), compact=True),
            caption="Residents during the focus year",
        ),
        HighlightStat(
            label="Extreme weather events",
            value=format_integer(_metric_or_none(record, "Extreme_Weather_Events")),
            caption="Reported incidents impacting communities",
        ),
    )


def trend_series(
    series: Sequence[EnvironmentRecord],
    metric: str,
    *,
    label: str,
) -> TrendSeries:
    """Year labels and metric values for a country time series; gaps are None."""
    points = [r for r in series if r.year is not None]
    return TrendSeries(
        label=label,
        years=tuple(r.year for r in points),
        values=tuple(r.metric(metric) if is_finite(r.metric(metric)) else None for r in points),
    )


def temperature_trend(series: Sequence[EnvironmentRecord], country: str) -> TrendSeries:
    return trend_series(
        series,
        "Avg_Temperature_degC",
        label=f"{country or 'Country'} avg temperature (°C)",
    )


def rainfall_trend(series: Sequence[EnvironmentRecord], country: str) -> TrendSeries:
    return trend_series(series, "Rainfall_mm", label=f"{country or 'Country'} rainfall (mm)")


def aggregate_trend(points: Sequence[YearlyMean], *, label: str = "Global sea level rise (mm)") -> TrendSeries:
    return TrendSeries(
        label=label,
        years=tuple(p.year for p in points),
        values=tuple(p.value for p in points),
    )


def metric_profile(record: Optional[EnvironmentRecord]) -> MetricProfile:
    """
    Radar-style profile of the selected row. Missing or non-finite
    metrics are drawn as 0.
    """
    metrics = (
        ("Avg temp (°C)", "Avg_Temperature_degC"),
        ("Renewables (%)", "Renewable_Energy_pct"),
        ("Forest area (%)", "Forest_Area_pct"),
        ("Extreme weather events", "Extreme_Weather_Events"),
    )
    values = []
    for _, column in metrics:
        value = _metric_or_none(record, column)
        values.append(float(value) if is_finite(value) else 0.0)

    if record is not None and record.country:
        title = f"{record.country} profile ({record.year})"
    else:
        title = "Metric profile"

    return MetricProfile(
        title=title,
        labels=tuple(label for label, _ in metrics),
        values=tuple(values),
    )


def renewable_split(record: Optional[EnvironmentRecord]) -> Tuple[float, float]:
    """(renewable, other sources), renewable clamped to [0, 100]."""
    renewable = _metric_or_none(record, "Renewable_Energy_pct")
    share = min(max(float(renewable), 0.0), 100.0) if is_finite(renewable) else 0.0
    return share, 100.0 - share


def scatter_points(cross_section: Sequence[EnvironmentRecord]) -> Tuple[ScatterPoint, ...]:
    return tuple(
        ScatterPoint(
            country=r.country,
            co2_tons_per_capita=r.co2_emissions_tons_per_capita,
            renewable_energy_pct=r.renewable_energy_pct,
            population=r.population if is_finite(r.population) else None,
        )
        for r in cross_section
    )


__all__ = [
    "MISSING_TEXT",
    "HighlightStat",
    "TrendSeries",
    "MetricProfile",
    "ScatterPoint",
    "format_number",
    "format_integer",
    "highlight_stats",
    "trend_series",
    "temperature_trend",
    "rainfall_trend",
    "aggregate_trend",
    "metric_profile",
    "renewable_split",
    "scatter_points",
]
