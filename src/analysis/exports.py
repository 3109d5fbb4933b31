"""
One-shot analytical artefacts for the selected country-year.

- Artefact 1: <country>_trend.png
    Temperature line (left axis) and rainfall bars (right axis) for the
    selected country's time series.

- Artefact 2: ranking_summary.csv (optionally .xlsx)
    Top-N population ranking of the selected year, followed by the
    global yearly sea-level mean.

These files are outputs only; the pipeline never reads them back.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402

from analysis.derived_views import YearlyMean  # noqa: E402
from analysis.highlights import rainfall_trend, temperature_trend  # noqa: E402
from pipeline.models import EnvironmentRecord  # noqa: E402

ANALYSIS_OUTPUT_DIR = Path("analysis")
RANKING_CSV_NAME = "ranking_summary.csv"
RANKING_XLSX_NAME = "ranking_summary.xlsx"


def _slug(text: str) -> str:
    s = re.sub(r"[^A-Za-z0-9]+", "_", text).strip("_").lower()
    return s or "country"


def build_country_trend_chart(
    series: Sequence[EnvironmentRecord],
    country: str,
    *,
    output_dir: Path | str = ANALYSIS_OUTPUT_DIR,
) -> Path:
    """
    Save the temperature/rainfall trend chart for `country` as PNG.

    Raises RuntimeError when the series has no dated rows.
    """
    temperature = temperature_trend(series, country)
    rainfall = rainfall_trend(series, country)
    if not temperature.years:
        raise RuntimeError(f"No time series available for country={country!r}")

    years = np.array(temperature.years)
    temp_values = np.array([np.nan if v is None else v for v in temperature.values], dtype=float)
    rain_values = np.array([np.nan if v is None else v for v in rainfall.values], dtype=float)

    fig, ax_temp = plt.subplots(figsize=(10, 6))
    ax_rain = ax_temp.twinx()

    ax_rain.bar(years, rain_values, color="#0ea5e9", alpha=0.45, label=rainfall.label)
    ax_temp.plot(years, temp_values, color="#2563eb", linewidth=2, marker="o", label=temperature.label)

    ax_temp.set_xlabel("Year")
    ax_temp.set_ylabel("Average temperature (°C)")
    ax_rain.set_ylabel("Rainfall (mm)")
    ax_temp.set_zorder(ax_rain.get_zorder() + 1)
    ax_temp.patch.set_visible(False)
    ax_temp.grid(True, linestyle="--", alpha=0.3)

    handles, labels = [], []
    for axis in (ax_temp, ax_rain):
        h, lab = axis.get_legend_handles_labels()
        handles.extend(h)
        labels.extend(lab)
    ax_temp.legend(handles, labels, frameon=False, loc="upper left")

    ax_temp.set_title(f"Climate trend - {country}")
    fig.tight_layout()

    output_root = Path(output_dir)
    output_root.mkdir(parents=True, exist_ok=True)
    output_path = output_root / f"{_slug(country)}_trend.png"
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path


def build_ranking_frame(ranking: Sequence[EnvironmentRecord]) -> pd.DataFrame:
    rows = [
        {
            "rank": position,
            "country": record.country,
            "year": record.year,
            "population": record.population,
            "co2_tons_per_capita": record.co2_emissions_tons_per_capita,
            "renewable_energy_pct": record.renewable_energy_pct,
        }
        for position, record in enumerate(ranking, start=1)
    ]
    return pd.DataFrame(
        rows,
        columns=[
            "rank",
            "country",
            "year",
            "population",
            "co2_tons_per_capita",
            "renewable_energy_pct",
        ],
    )


def build_aggregate_frame(points: Sequence[YearlyMean]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"year": p.year, "mean_value": p.value, "contributors": p.contributors} for p in points],
        columns=["year", "mean_value", "contributors"],
    )


def build_ranking_summary(
    ranking: Sequence[EnvironmentRecord],
    aggregate: Sequence[YearlyMean],
    *,
    output_dir: Path | str = ANALYSIS_OUTPUT_DIR,
    write_xlsx: bool = False,
) -> List[Path]:
    """
    Write the ranking and the global aggregate as CSV (and XLSX).

    The CSV stacks both tables with a `section` column; the XLSX keeps them
    on separate sheets.
    """
    ranking_df = build_ranking_frame(ranking)
    aggregate_df = build_aggregate_frame(aggregate)

    if ranking_df.empty:
        print("[analysis] Ranking is empty for the selected year; writing aggregate only.")

    output_root = Path(output_dir)
    output_root.mkdir(parents=True, exist_ok=True)

    csv_path = output_root / RANKING_CSV_NAME
    combined = pd.concat(
        [
            ranking_df.assign(section="top_population"),
            aggregate_df.assign(section="global_yearly_mean"),
        ],
        ignore_index=True,
        sort=False,
    )
    combined = combined[["section", *[c for c in combined.columns if c != "section"]]]
    combined.to_csv(csv_path, index=False)
    paths = [csv_path]

    if write_xlsx:
        xlsx_path = output_root / RANKING_XLSX_NAME
        with pd.ExcelWriter(xlsx_path, engine="openpyxl") as writer:
            ranking_df.to_excel(writer, index=False, sheet_name="top_population")
            aggregate_df.to_excel(writer, index=False, sheet_name="global_yearly_mean")
        paths.append(xlsx_path)

    return paths


__all__ = [
    "ANALYSIS_OUTPUT_DIR",
    "RANKING_CSV_NAME",
    "RANKING_XLSX_NAME",
    "build_country_trend_chart",
    "build_ranking_frame",
    "build_aggregate_frame",
    "build_ranking_summary",
]
