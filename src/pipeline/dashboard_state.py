"""
Immutable dashboard state and its transitions.

The dashboard only ever holds one DashboardState value. Every event
(ingesting new text, picking a country, picking a year) returns a new
state; nothing is mutated in place.

Ingestion runs parse -> normalize -> index -> resolve as one step:

- empty or unparseable input leaves the previous dataset and selection
  untouched and only records the error message;
- a successful parse that yields zero rows replaces the dataset with an
  empty one (countries = [], years = []) and flags EmptyDatasetError;
- otherwise the dataset is replaced wholesale and the selection is
  re-resolved when the domain index changed.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from dashboard_config import DashboardSettings
from ingestion.csv_parser import parse_csv_text
from pipeline.errors import DashboardError, EmptyInputError, UnparseableInputError
from pipeline.models import Dataset, DomainIndex, Selection
from pipeline.selection_resolver import resolve_country, resolve_selection, resolve_year
from transformations.domain_index import build_domain_index
from transformations.record_normalizer import normalize_records


@dataclass(frozen=True)
class DashboardState:
    dataset: Dataset = Dataset()
    index: DomainIndex = DomainIndex()
    selection: Selection = Selection()
    # User-visible message from the last ingestion, if it failed.
    error: Optional[str] = None
    loaded: bool = False


@dataclass(frozen=True)
class IngestOutcome:
    state: DashboardState
    error: Optional[DashboardError] = None
    diagnostics: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None


def initial_state() -> DashboardState:
    return DashboardState()


def ingest_text(
    state: DashboardState,
    text: Optional[str],
    source_label: Optional[str] = None,
    settings: Optional[DashboardSettings] = None,
) -> IngestOutcome:
    """
    Replace the active dataset with the one parsed from `text`.

    Parameters
    ----------
    state:
        Current state; returned unchanged (apart from `error`) on
        structural failures.
    text:
        Raw CSV content.
    source_label:
        Name shown for the dataset (file name, URL tail...). Defaults to
        `settings.default_source_label`.
    settings:
        Preferred default country and labels; defaults to DashboardSettings().
    """
    settings = settings or DashboardSettings()

    try:
        table = parse_csv_text(text or "")
    except (EmptyInputError, UnparseableInputError) as exc:
        print(f"[ingest] {exc.__class__.__name__}: {exc}")
        return IngestOutcome(state=replace(state, error=exc.user_message), error=exc)

    if table.diagnostics:
        print(f"[ingest] {len(table.diagnostics)} malformed rows truncated while parsing.")

    result = normalize_records(table.rows, table.columns)
    if result.warnings:
        print(f"[ingest] {len(result.warnings)} cells could not be converted to numbers.")

    dataset = Dataset(
        records=result.records,
        columns=table.columns,
        source_label=source_label or settings.default_source_label,
    )
    index = build_domain_index(dataset.records)

    if state.loaded and index == state.index:
        selection = state.selection
    else:
        selection = resolve_selection(
            state.selection,
            index,
            preferred_country=settings.preferred_country,
        )

    new_state = DashboardState(
        dataset=dataset,
        index=index,
        selection=selection,
        error=result.error.user_message if result.error is not None else None,
        loaded=True,
    )
    return IngestOutcome(
        state=new_state,
        error=result.error,
        diagnostics=table.diagnostics,
        warnings=result.warnings,
    )


def select_country(
    state: DashboardState,
    country: Optional[str],
    settings: Optional[DashboardSettings] = None,
) -> DashboardState:
    """Explicit user pick; values outside the domain fall back."""
    settings = settings or DashboardSettings()
    resolved = resolve_country(
        country,
        state.index.countries,
        preferred=settings.preferred_country,
    )
    if resolved == state.selection.country:
        return state
    return replace(state, selection=replace(state.selection, country=resolved))


def select_year(state: DashboardState, year: Optional[int]) -> DashboardState:
    """Explicit user pick; values outside the domain fall back to the latest year."""
    resolved = resolve_year(year, state.index.years)
    if resolved == state.selection.year:
        return state
    return replace(state, selection=replace(state.selection, year=resolved))


__all__ = [
    "DashboardState",
    "IngestOutcome",
    "initial_state",
    "ingest_text",
    "select_country",
    "select_year",
]
