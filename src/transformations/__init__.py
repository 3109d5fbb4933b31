"""
Transformations layer
----------------------

Módulos responsáveis por converter as linhas RAW do CSV em registros
tipados (EnvironmentRecord) e derivar o índice de domínio (países/anos).
"""

from .record_normalizer import NormalizationResult, normalize_records  # noqa: F401
from .domain_index import build_domain_index, country_sort_key  # noqa: F401

__all__ = [
    "NormalizationResult",
    "normalize_records",
    "build_domain_index",
    "country_sort_key",
]
