"""
Normalização das linhas RAW do CSV ambiental em EnvironmentRecord.

Regras aplicadas:

- Linhas estruturalmente vazias (todas as células em branco) são descartadas.
- `Country` é copiado como texto, com trim nas pontas; linhas com país
  vazio são mantidas (ainda carregam ano e métricas).
- `Year` é convertido para int. Valores não numéricos, infinitos ou não inteiros
  viram None (o registro continua no dataset, mas nunca é alcançado por
  filtros de ano).
- As métricas conhecidas (ver `pipeline.models.METRIC_COLUMNS`) são
  convertidas com `pd.to_numeric(errors="coerce")`. Uma célula inválida
  vira NaN e gera um FieldCoercionWarning; a linha nunca é descartada por
  isso. Células em branco também viram NaN, mas sem warning.
- Colunas fora do schema são preservadas como texto em `extras`.

A normalização é determinística e preserva a ordem das linhas.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from pipeline.errors import EmptyDatasetError, FieldCoercionWarning
from pipeline.models import (
    COUNTRY_COLUMN,
    METRIC_COLUMNS,
    SCHEMA_COLUMNS,
    YEAR_COLUMN,
    EnvironmentRecord,
)


@dataclass(frozen=True)
class NormalizationResult:
    records: Tuple[EnvironmentRecord, ...]
    warnings: Tuple[str, ...] = ()
    coercion_failures: Tuple[FieldCoercionWarning, ...] = ()
    error: Optional[EmptyDatasetError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _is_blank(value: Optional[str]) -> bool:
    # Columns missing from the CSV arrive as NaN in the frame.
    return value is None or pd.isna(value) or not str(value).strip()


def _coerce_numeric(raw: pd.Series) -> Tuple[pd.Series, pd.Series]:
    """
    Convert a text column to float.

    Returns (numeric, failed) where `failed` flags non-blank cells that
    could not be parsed.
    """
    stripped = raw.where(raw.notna(), "").astype(str).str.strip()
    numeric = pd.to_numeric(stripped.replace("", np.nan), errors="coerce").astype("float64")
    failed = stripped.ne("") & numeric.isna()
    return numeric, failed


def _coerce_year(raw: pd.Series) -> Tuple[List[Optional[int]], pd.Series]:
    numeric, failed = _coerce_numeric(raw)
    finite = numeric.notna() & np.isfinite(numeric)
    integral = finite & (numeric == numeric.round())
    # Infinite and fractional years ("inf", "2020.5") are reported as well.
    failed = failed | (numeric.notna() & ~finite) | (finite & ~integral)
    years = [int(v) if ok else None for v, ok in zip(numeric.tolist(), integral.tolist())]
    return years, failed


def normalize_records(
    rows: Sequence[Mapping[str, Optional[str]]],
    columns: Sequence[str],
) -> NormalizationResult:
    """
    Normalize raw parsed rows into immutable EnvironmentRecord values.

    An empty result is reported through `NormalizationResult.error`
    (EmptyDatasetError) instead of being raised, so callers can present it
    as a non-fatal state.
    """
    kept: List[Tuple[int, Mapping[str, Optional[str]]]] = [
        (position, row)
        for position, row in enumerate(rows)
        if row and not all(_is_blank(v) for v in row.values())
    ]

    if not kept:
        return NormalizationResult(
            records=(),
            error=EmptyDatasetError("CSV parsed successfully but contained no rows."),
        )

    frame_columns = list(dict.fromkeys([*columns, *SCHEMA_COLUMNS]))
    frame = pd.DataFrame([dict(row) for _, row in kept], columns=frame_columns, dtype=object)
    positions = [position for position, _ in kept]

    failures: List[FieldCoercionWarning] = []

    def _collect(column: str, failed: pd.Series) -> None:
        for offset in np.flatnonzero(failed.to_numpy()):
            failures.append(
                FieldCoercionWarning(
                    row_index=positions[offset],
                    column=column,
                    raw_value=str(frame[column].iat[offset]),
                )
            )

    years, year_failed = _coerce_year(frame[YEAR_COLUMN])
    _collect(YEAR_COLUMN, year_failed)

    metric_values: Dict[str, List[float]] = {}
    for column, attr in METRIC_COLUMNS.items():
        numeric, failed = _coerce_numeric(frame[column])
        _collect(column, failed)
        metric_values[attr] = numeric.tolist()

    countries = [
        "" if _is_blank(v) else str(v).strip()
        for v in frame[COUNTRY_COLUMN].tolist()
    ]
    extra_columns = [c for c in columns if c not in SCHEMA_COLUMNS]

    records: List[EnvironmentRecord] = []
    for offset, (_, raw_row) in enumerate(kept):
        records.append(
            EnvironmentRecord(
                country=countries[offset],
                year=years[offset],
                extras={c: raw_row.get(c) for c in extra_columns},
                **{attr: values[offset] for attr, values in metric_values.items()},
            )
        )

    # Ordenar por (linha, coluna do header) para mensagens estáveis.
    column_order = {c: i for i, c in enumerate(frame_columns)}
    failures.sort(key=lambda w: (w.row_index, column_order.get(w.column, 0)))

    return NormalizationResult(
        records=tuple(records),
        warnings=tuple(w.message for w in failures),
        coercion_failures=tuple(failures),
    )


__all__ = ["NormalizationResult", "normalize_records"]
