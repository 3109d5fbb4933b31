"""
Pipeline core
-------------

Value types, error taxonomy, selection fallback rules and the immutable
dashboard state transitions.
"""

from .errors import (  # noqa: F401
    DashboardConfigError,
    DashboardError,
    EmptyDatasetError,
    EmptyInputError,
    FieldCoercionWarning,
    SourceReadError,
    UnparseableInputError,
)
from .models import (  # noqa: F401
    METRIC_COLUMNS,
    SCHEMA_COLUMNS,
    Dataset,
    DomainIndex,
    EnvironmentRecord,
    Selection,
)
from .selection_resolver import (  # noqa: F401
    resolve_country,
    resolve_selection,
    resolve_year,
)

__all__ = [
    "DashboardError",
    "DashboardConfigError",
    "EmptyInputError",
    "UnparseableInputError",
    "EmptyDatasetError",
    "SourceReadError",
    "FieldCoercionWarning",
    "METRIC_COLUMNS",
    "SCHEMA_COLUMNS",
    "EnvironmentRecord",
    "Dataset",
    "DomainIndex",
    "Selection",
    "resolve_country",
    "resolve_year",
    "resolve_selection",
]
