"""Unit tests for record normalization."""

from __future__ import annotations

import math

import pytest

from ingestion.csv_parser import parse_csv_text
from pipeline.errors import EmptyDatasetError
from transformations.record_normalizer import normalize_records
from tests.fixture_paths import csv_text


def _normalize(text: str):
    table = parse_csv_text(text)
    return normalize_records(table.rows, table.columns)


def test_normalize_records_coerces_schema_fields() -> None:
    """Year should become int and metrics floats."""
    result = _normalize(csv_text("Brazil,2020,25.3,2.1,3.3,1680,212600000,46.2,14,59.2"))

    record = result.records[0]
    assert record.country == "Brazil"
    assert record.year == 2020
    assert isinstance(record.year, int)
    assert record.population == 212600000.0
    assert record.metric("Renewable_Energy_pct") == 46.2
    assert result.ok


def test_normalize_records_keeps_row_with_bad_cell() -> None:
    """A non-numeric cell should become NaN and produce a warning, not drop the row."""
    result = _normalize(csv_text("India,2021,25.4,1.9,3.7,1150,not-a-number,10.4,24,24.3"))

    assert len(result.records) == 1
    assert math.isnan(result.records[0].population)
    assert len(result.coercion_failures) == 1
    failure = result.coercion_failures[0]
    assert (failure.row_index, failure.column, failure.raw_value) == (0, "Population", "not-a-number")
    assert "Population" in result.warnings[0]


def test_normalize_records_treats_blank_cells_as_missing_without_warning() -> None:
    """Blank metric cells should be NaN but not counted as coercion failures."""
    result = _normalize(csv_text("Canada,2021,-1.5,14.5,3.2,,38200000,19.9,11,38.6"))

    assert math.isnan(result.records[0].rainfall_mm)
    assert result.warnings == ()


def test_normalize_records_rejects_fractional_year() -> None:
    """Non-integral years should be missing and reported."""
    result = _normalize(csv_text("Brazil,2020.5,25.3,2.1,3.3,1680,1,46.2,14,59.2"))

    assert result.records[0].year is None
    assert result.coercion_failures[0].column == "Year"


@pytest.mark.parametrize("raw", ["inf", "-inf"])
def test_normalize_records_rejects_infinite_year(raw: str) -> None:
    """Infinite years should be missing and reported like any bad cell."""
    result = _normalize(f"Country,Year\nA,{raw}\n")

    assert result.records[0].year is None
    assert [(w.column, w.raw_value) for w in result.coercion_failures] == [("Year", raw)]


def test_normalize_records_without_country_column_leaves_country_empty() -> None:
    """A CSV lacking the Country column should not invent a "nan" country."""
    result = _normalize("Year,Population\n2020,5\n")

    record = result.records[0]
    assert record.country == ""
    assert record.year == 2020
    assert record.population == 5.0
    assert result.warnings == ()


def test_normalize_records_trims_country_and_keeps_empty_country_rows() -> None:
    """Country should be trimmed; rows with empty country are retained."""
    result = _normalize(
        csv_text(
            "  Brazil ,2020,25.3,2.1,3.3,1680,1,46.2,14,59.2",
            ",2020,10,1,1,1,1,1,1,1",
        )
    )

    assert [r.country for r in result.records] == ["Brazil", ""]


def test_normalize_records_drops_structurally_empty_rows() -> None:
    """Rows where every cell is blank should be dropped."""
    result = _normalize(csv_text(",,,,,,,,,", "Brazil,2020,1,1,1,1,1,1,1,1"))

    assert [r.country for r in result.records] == ["Brazil"]


def test_normalize_records_preserves_extra_columns() -> None:
    """Columns outside the schema should be kept verbatim as extras."""
    result = _normalize("Country,Year,Region\nBrazil,2020,South America\n")

    record = result.records[0]
    assert record.extras == {"Region": "South America"}
    assert math.isnan(record.population)


def test_normalize_records_reports_empty_dataset_as_result() -> None:
    """Zero surviving rows should be returned as EmptyDatasetError, not raised."""
    result = _normalize(csv_text())

    assert result.records == ()
    assert isinstance(result.error, EmptyDatasetError)
    assert not result.ok


def test_normalize_records_is_deterministic() -> None:
    """Two calls on the same input should give equal output in the same order."""
    text = csv_text(
        "Canada,2020,1,1,1,1,1,1,1,1",
        "Brazil,2019,2,2,2,2,2,2,2,2",
    )

    first = _normalize(text)
    second = _normalize(text)

    assert [r.to_dict() for r in first.records] == [r.to_dict() for r in second.records]
    assert [r.country for r in first.records] == ["Canada", "Brazil"]
