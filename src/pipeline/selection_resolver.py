"""
Fallback rules that keep the country/year selection inside the domain.

Both resolvers are fixed points: feeding their output back with the same
domain returns the same value.
"""

from __future__ import annotations

from typing import Optional, Sequence

from pipeline.models import DomainIndex, Selection

DEFAULT_PREFERRED_COUNTRY = "Canada"


def resolve_country(
    prior: Optional[str],
    countries: Sequence[str],
    *,
    preferred: Optional[str] = DEFAULT_PREFERRED_COUNTRY,
) -> str:
    """
    Keep `prior` when it is a member of `countries`; otherwise fall back to
    `preferred` when present, else the first country, else "".
    """
    if prior and prior in countries:
        return prior
    if not countries:
        return ""
    if preferred and preferred in countries:
        return preferred
    return countries[0]


def resolve_year(prior: Optional[int], years: Sequence[int]) -> Optional[int]:
    """Keep `prior` when present in `years`, else the latest year, else None."""
    if prior is not None and prior in years:
        return prior
    if not years:
        return None
    return max(years)


def resolve_selection(
    prior: Selection,
    index: DomainIndex,
    *,
    preferred_country: Optional[str] = DEFAULT_PREFERRED_COUNTRY,
) -> Selection:
    return Selection(
        country=resolve_country(prior.country, index.countries, preferred=preferred_country),
        year=resolve_year(prior.year, index.years),
    )


__all__ = [
    "DEFAULT_PREFERRED_COUNTRY",
    "resolve_country",
    "resolve_year",
    "resolve_selection",
]
