"""
Parsing of raw delimited text into loosely-typed rows.

The reader follows the usual CSV dialect: a header row, quoted fields,
delimiters and newlines embedded inside quotes, and doubled quote
characters as escapes. Every cell is kept as text; numeric coercion is the
job of `transformations.record_normalizer`.

Rows with more fields than the header are kept, truncated to the header
width, and reported in `ParsedTable.diagnostics` instead of being raised.
Short rows are padded with missing cells. Only input that is empty or
structurally broken (e.g. an unterminated quoted field) raises.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from pipeline.errors import EmptyInputError, UnparseableInputError

RawRow = Dict[str, Optional[str]]


@dataclass(frozen=True)
class ParsedTable:
    """Output of parse_csv_text: rows keyed by header, in row order."""

    rows: Tuple[RawRow, ...]
    columns: Tuple[str, ...]
    diagnostics: Tuple[str, ...] = ()


def _dedupe_header(header: Sequence[str]) -> Tuple[str, ...]:
    # Repeated names get a ".1", ".2"... suffix so every cell keeps a key.
    seen: Dict[str, int] = {}
    columns: List[str] = []
    for raw in header:
        name = raw.strip()
        if name in seen:
            seen[name] += 1
            candidate = f"{name}.{seen[name]}"
            while candidate in seen:
                seen[name] += 1
                candidate = f"{name}.{seen[name]}"
            name = candidate
        seen.setdefault(name, 0)
        columns.append(name)
    return tuple(columns)


def parse_csv_text(text: str, *, delimiter: str = ",") -> ParsedTable:
    """
    Parse delimiter-separated text with a header row.

    Parameters
    ----------
    text:
        Full CSV content (already decoded).
    delimiter:
        Field separator, "," by default.

    Raises
    ------
    EmptyInputError
        When the text is empty after trimming whitespace.
    UnparseableInputError
        When the text cannot be tokenised as delimited text.
    """
    if text is None or not text.strip():
        raise EmptyInputError("No CSV content found.")

    reader = csv.reader(
        io.StringIO(text.strip()),
        delimiter=delimiter,
        quotechar='"',
        doublequote=True,
        quoting=csv.QUOTE_MINIMAL,
        strict=True,
    )

    try:
        lines = [line for line in reader if line]
    except csv.Error as exc:
        raise UnparseableInputError(
            f"Failed to parse CSV near line {reader.line_num}: {exc}"
        ) from exc

    if not lines:
        raise EmptyInputError("No CSV content found.")

    columns = _dedupe_header(lines[0])
    width = len(columns)

    rows: List[RawRow] = []
    diagnostics: List[str] = []
    for number, values in enumerate(lines[1:], start=1):
        if len(values) > width:
            diagnostics.append(
                f"Data row {number}: malformed row with {len(values)} fields "
                f"(expected {width}); extra fields dropped: "
                f"{delimiter.join(values[width:])[:80]!r}"
            )
            values = values[:width]
        row: RawRow = dict(zip(columns, values))
        for column in columns[len(values):]:
            row[column] = None
        # Rows that carry no keys at all are dropped.
        if not row:
            continue
        rows.append(row)

    return ParsedTable(rows=tuple(rows), columns=columns, diagnostics=tuple(diagnostics))


__all__ = ["RawRow", "ParsedTable", "parse_csv_text"]
