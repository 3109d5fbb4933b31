"""Integration tests for the end-to-end dashboard pipeline."""

from __future__ import annotations

import math
from pathlib import Path

import pytest

from analysis import DerivedViewEngine
from dashboard_config import DashboardSettings
from ingestion import read_source_text
from local_dashboard import main, run_local_dashboard
from pipeline.dashboard_state import ingest_text, initial_state, select_year
from tests.fixture_paths import fixture_path


@pytest.fixture()
def sample_state():
    source = read_source_text(fixture_path("environment_sample.csv"))
    return ingest_text(initial_state(), source.text, source.label)


def test_sample_dataset_round_trips_domain(sample_state) -> None:
    """Indexed countries and years should equal the distinct input values."""
    state = sample_state.state

    assert state.index.countries == ("Brazil", "Canada", "India", "Korea, Republic of")
    assert state.index.years == (2019, 2020, 2021)
    assert state.dataset.record_count == 11
    assert state.dataset.columns[-1] == "Region"
    assert len(sample_state.warnings) == 1


def test_sample_dataset_views(sample_state) -> None:
    """Views for the default selection should reflect the sample data."""
    state = sample_state.state
    views = DerivedViewEngine().compute(state.dataset.records, state.selection)

    assert (state.selection.country, state.selection.year) == ("Canada", 2021)
    assert views.current_record.extras == {"Region": "North America"}
    assert math.isnan(views.current_record.rainfall_mm)
    assert [r.country for r in views.ranking] == ["Brazil", "Korea, Republic of", "Canada"]
    assert [r.country for r in views.cross_section] == [
        "Brazil",
        "Canada",
        "India",
        "Korea, Republic of",
    ]
    assert [p.value for p in views.global_aggregate] == [
        pytest.approx(3.13),
        pytest.approx(3.25),
        pytest.approx(3.47),
    ]


def test_graceful_degradation_for_bad_population(sample_state) -> None:
    """India 2021 has a bad Population cell: kept, but not ranked."""
    state = select_year(sample_state.state, 2021)
    records = [r for r in state.dataset.records if r.country == "India" and r.year == 2021]
    views = DerivedViewEngine().compute(state.dataset.records, state.selection)

    assert len(records) == 1
    assert math.isnan(records[0].population)
    assert "India" not in [r.country for r in views.ranking]


def test_run_local_dashboard_exports_artefacts(tmp_path: Path, capsys) -> None:
    """The local entrypoint should print a summary and write artefacts."""
    result = run_local_dashboard(
        fixture_path("environment_sample.csv"),
        country="Brazil",
        year=2020,
        output_dir=tmp_path,
        charts=True,
        settings=DashboardSettings(top_n=2),
    )

    names = sorted(p.name for p in result["artefacts"])
    out = capsys.readouterr().out
    assert names == ["brazil_trend.png", "ranking_summary.csv"]
    assert [r.country for r in result["views"].ranking] == ["India", "Brazil"]
    assert "Top 2 populations (2020)" in out


def test_main_runs_from_arguments(capsys, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """The argparse entrypoint should run with only a source argument."""
    monkeypatch.chdir(tmp_path)
    for name in ("DASHBOARD_TOP_N", "DASHBOARD_PREFERRED_COUNTRY", "DASHBOARD_AGGREGATE_DECIMALS"):
        monkeypatch.delenv(name, raising=False)

    main([str(fixture_path("environment_sample.csv"))])

    out = capsys.readouterr().out
    assert "Country: Canada  Year: 2021" in out
