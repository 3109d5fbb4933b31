"""
Local entrypoint for the environmental dashboard pipeline.

Runs the whole chain once on a CSV file or URL and prints what the
dashboard would show:

1. Read the CSV source (file or http(s) URL)
2. Parse + normalize + index + resolve the selection
3. Apply the optional --country / --year picks
4. Compute the derived views
5. Print highlights, ranking and global aggregate (optionally export
   the trend chart and the ranking summary)

Intended usage (local):

    PYTHONPATH=src python -m local_dashboard data/environment.csv

    PYTHONPATH=src python -m local_dashboard data/environment.csv \\
        --country Brazil --year 2020 --charts --xlsx
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence

from analysis import DerivedViewEngine, DerivedViews, format_number, highlight_stats
from dashboard_config import DashboardSettings, load_dotenv_if_present, load_settings
from ingestion import read_source_text
from pipeline.dashboard_state import (
    DashboardState,
    ingest_text,
    initial_state,
    select_country,
    select_year,
)


def run_local_dashboard(
    source: Path | str,
    *,
    country: Optional[str] = None,
    year: Optional[int] = None,
    output_dir: Optional[Path | str] = None,
    charts: bool = False,
    write_xlsx: bool = False,
    settings: Optional[DashboardSettings] = None,
) -> Dict[str, object]:
    """
    Run the pipeline end-to-end for one source.

    Returns
    -------
    result:
        {"state": DashboardState, "views": DerivedViews, "artefacts": [Path, ...]}
    """
    settings = settings or load_settings()

    print(f"[1/5] Reading CSV source {source}...")
    source_text = read_source_text(source, timeout=settings.http_timeout)

    print("[2/5] Parsing and normalizing records...")
    outcome = ingest_text(initial_state(), source_text.text, source_text.label, settings)
    state: DashboardState = outcome.state
    if outcome.error is not None:
        print(f"      {state.error}")
    print(
        f"      Active dataset: {state.dataset.source_label} "
        f"({state.dataset.record_count} rows, {state.dataset.metric_count} columns, "
        f"{len(outcome.warnings)} coercion warnings)"
    )

    print("[3/5] Resolving selection...")
    if country is not None:
        state = select_country(state, country, settings)
    if year is not None:
        state = select_year(state, year)
    print(f"      Country: {state.selection.country or '--'}  Year: {state.selection.year or '--'}")

    print("[4/5] Computing derived views...")
    engine = DerivedViewEngine.from_settings(settings)
    views: DerivedViews = engine.compute(state.dataset.records, state.selection)

    print("[5/5] Summary")
    _print_views(views, settings)

    artefacts: List[Path] = []
    if output_dir is not None:
        # Imported lazily so plain summaries do not need matplotlib.
        from analysis.exports import build_country_trend_chart, build_ranking_summary

        if charts and views.country_series:
            artefacts.append(
                build_country_trend_chart(
                    views.country_series,
                    state.selection.country,
                    output_dir=output_dir,
                )
            )
        artefacts.extend(
            build_ranking_summary(
                views.ranking,
                views.global_aggregate,
                output_dir=output_dir,
                write_xlsx=write_xlsx,
            )
        )
        for path in artefacts:
            print(f"      Artefact: {path}")

    return {"state": state, "views": views, "artefacts": artefacts}


def _print_views(views: DerivedViews, settings: DashboardSettings) -> None:
    for stat in highlight_stats(views.current_record):
        print(f"      {stat.label:<24} {stat.value}")

    print(f"      Top {settings.top_n} populations ({views.selection.year or '--'}):")
    for position, record in enumerate(views.ranking, start=1):
        print(f"        {position}. {record.country:<20} {format_number(record.population, compact=True)}")

    print("      Global sea level rise (mean mm per year):")
    for point in views.global_aggregate:
        print(f"        {point.year}: {point.value:.{settings.aggregate_decimals}f}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    import argparse

    parser = argparse.ArgumentParser(
        description="Run the environmental dashboard pipeline on a CSV file or URL.",
    )
    parser.add_argument("source", help="Path or http(s) URL of the CSV dataset.")
    parser.add_argument("--country", type=str, default=None, help="Country to select.")
    parser.add_argument("--year", type=int, default=None, help="Year to select.")
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for exported artefacts (ranking CSV, optional chart/XLSX).",
    )
    parser.add_argument("--charts", action="store_true", help="Export the country trend chart.")
    parser.add_argument("--xlsx", action="store_true", help="Also export the ranking as XLSX.")

    args = parser.parse_args(argv)
    load_dotenv_if_present()
    run_local_dashboard(
        args.source,
        country=args.country,
        year=args.year,
        output_dir=Path(args.output_dir) if args.output_dir else None,
        charts=args.charts,
        write_xlsx=args.xlsx,
    )


if __name__ == "__main__":
    main()


__all__ = ["run_local_dashboard", "main"]
