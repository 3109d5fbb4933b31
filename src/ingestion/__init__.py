"""
Ingestion layer
---------------

Reads raw CSV text (local file or URL) and tokenises it into rows keyed by
header name. No type coercion happens here.
"""

from .csv_parser import ParsedTable, RawRow, parse_csv_text  # noqa: F401
from .source_reader import SourceText, read_source_text  # noqa: F401

__all__ = [
    "ParsedTable",
    "RawRow",
    "parse_csv_text",
    "SourceText",
    "read_source_text",
]
