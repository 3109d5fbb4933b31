"""Unit tests for the domain index."""

from __future__ import annotations

from pipeline.models import EnvironmentRecord
from transformations.domain_index import build_domain_index


def test_build_domain_index_dedupes_and_sorts() -> None:
    """Countries and years should be distinct and sorted."""
    records = [
        EnvironmentRecord(country="India", year=2021),
        EnvironmentRecord(country="Brazil", year=2019),
        EnvironmentRecord(country="India", year=2019),
        EnvironmentRecord(country="Canada", year=2020),
    ]

    index = build_domain_index(records)

    assert index.countries == ("Brazil", "Canada", "India")
    assert index.years == (2019, 2020, 2021)


def test_build_domain_index_excludes_empty_country_and_missing_year() -> None:
    """Empty countries and missing years should not be indexed."""
    records = [
        EnvironmentRecord(country="", year=2020),
        EnvironmentRecord(country="Brazil", year=None),
    ]

    index = build_domain_index(records)

    assert index.countries == ("Brazil",)
    assert index.years == (2020,)


def test_build_domain_index_orders_accented_names_alphabetically() -> None:
    """Accents and case should not push names to the end of the list."""
    records = [
        EnvironmentRecord(country="Zambia", year=2020),
        EnvironmentRecord(country="Åland Islands", year=2020),
        EnvironmentRecord(country="belgium", year=2020),
        EnvironmentRecord(country="Brazil", year=2020),
    ]

    index = build_domain_index(records)

    assert index.countries == ("Åland Islands", "belgium", "Brazil", "Zambia")


def test_build_domain_index_of_empty_dataset_is_empty() -> None:
    """No records should give empty countries and years."""
    index = build_domain_index([])

    assert index.countries == ()
    assert index.years == ()
