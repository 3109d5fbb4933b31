"""
Índice de domínio (países e anos distintos) de um dataset normalizado.

Sempre recalculado a partir do dataset completo; nunca atualizado de forma
incremental.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable, Tuple

from pipeline.models import DomainIndex, EnvironmentRecord, is_finite


def country_sort_key(name: str) -> Tuple[str, str]:
    """
    Locale-aware-ish ordering key for country names.

    Compares case-folded names with accents removed first ("Åland" sorts
    with the A's), then the original spelling to keep the order total.
    """
    s = unicodedata.normalize("NFKD", name)
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    s = re.sub(r"\s+", " ", s).casefold().strip()
    return s, name


def build_domain_index(records: Iterable[EnvironmentRecord]) -> DomainIndex:
    """
    Distinct non-empty countries and distinct finite years.

    Records with a missing year stay in the dataset but are not indexed.
    """
    countries = set()
    years = set()
    for record in records:
        if record.country:
            countries.add(record.country)
        if is_finite(record.year):
            years.add(int(record.year))

    return DomainIndex(
        countries=tuple(sorted(countries, key=country_sort_key)),
        years=tuple(sorted(years)),
    )


__all__ = ["country_sort_key", "build_domain_index"]
