"""
Acquisition of raw CSV text from a local file or an HTTP(S) URL.

This is the only I/O boundary in front of the pipeline: once the text is
in memory, parse -> normalize -> index -> resolve -> derive runs
synchronously on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests

from common.retry import http_get_with_retries
from pipeline.errors import SourceReadError


@dataclass(frozen=True)
class SourceText:
    text: str
    label: str


def _is_url(source: str) -> bool:
    return urlparse(source).scheme in {"http", "https"}


def _label_for_url(url: str) -> str:
    tail = urlparse(url).path.rstrip("/").rsplit("/", 1)[-1]
    return tail or url


def read_source_text(
    source: Path | str,
    *,
    timeout: int = 30,
    session: Optional[requests.Session] = None,
) -> SourceText:
    """
    Read UTF-8 CSV text from `source`.

    The returned label is the file name (or the last URL path segment),
    which the state layer uses as the dataset's source label.
    """
    source_str = str(source)

    if _is_url(source_str):
        try:
            resp = http_get_with_retries(source_str, timeout=timeout, session=session)
            resp.raise_for_status()
        except requests.exceptions.RequestException as exc:
            raise SourceReadError(f"Could not fetch {source_str}: {exc}") from exc
        if "charset" not in resp.headers.get("Content-Type", "").lower():
            resp.encoding = "utf-8"
        return SourceText(text=resp.text, label=_label_for_url(source_str))

    path = Path(source_str)
    try:
        # utf-8-sig tolerates the BOM spreadsheet tools like to prepend.
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(f"Could not read {path}: {exc}") from exc
    return SourceText(text=text, label=path.name)


__all__ = ["SourceText", "read_source_text"]
