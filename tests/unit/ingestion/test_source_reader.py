"""Unit tests for CSV source acquisition."""

from __future__ import annotations

from pathlib import Path

import pytest
import requests

from ingestion.source_reader import read_source_text
from pipeline.errors import SourceReadError
from tests.fixture_paths import fixture_path


class _FakeResponse:
    def __init__(self, status_code: int, text: str = "", headers: dict | None = None) -> None:
        self.status_code = status_code
        self.text = text
        self.headers = headers or {}
        self.encoding = None

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"HTTP {self.status_code}")


class _FakeSession:
    def __init__(self, responses: list) -> None:
        self.responses = list(responses)
        self.calls = 0

    def get(self, url, headers=None, timeout=None):
        self.calls += 1
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def test_read_source_text_reads_local_file_with_name_label() -> None:
    """Local files should be read as UTF-8 and labelled by file name."""
    source = read_source_text(fixture_path("environment_sample.csv"))

    assert source.label == "environment_sample.csv"
    assert source.text.startswith("Country,Year")


def test_read_source_text_strips_utf8_bom(tmp_path: Path) -> None:
    """A UTF-8 BOM should not leak into the first header name."""
    path = tmp_path / "bom.csv"
    path.write_bytes("\ufeffCountry,Year\nBrazil,2020\n".encode("utf-8"))

    source = read_source_text(path)

    assert source.text.startswith("Country,Year")


def test_read_source_text_raises_for_missing_file(tmp_path: Path) -> None:
    """Missing files should raise SourceReadError."""
    with pytest.raises(SourceReadError):
        read_source_text(tmp_path / "missing.csv")


def test_read_source_text_fetches_url_and_retries_transient_status(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """URL sources should retry 503s and label the dataset by path tail."""
    monkeypatch.setattr("common.retry.time.sleep", lambda seconds: None)
    session = _FakeSession(
        [
            _FakeResponse(503, headers={"Retry-After": "0"}),
            _FakeResponse(200, text="Country,Year\nBrazil,2020\n"),
        ]
    )

    source = read_source_text("https://example.org/data/environment.csv", session=session)

    assert session.calls == 2
    assert source.label == "environment.csv"
    assert "Brazil" in source.text


def test_read_source_text_raises_after_connection_errors(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Exhausted connection retries should raise SourceReadError."""
    monkeypatch.setattr("common.retry.time.sleep", lambda seconds: None)
    session = _FakeSession([requests.exceptions.ConnectionError("down")] * 4)

    with pytest.raises(SourceReadError):
        read_source_text("https://example.org/environment.csv", session=session)

    assert session.calls == 4


def test_read_source_text_raises_for_http_error_status() -> None:
    """Non-retryable HTTP errors should raise SourceReadError."""
    session = _FakeSession([_FakeResponse(404)])

    with pytest.raises(SourceReadError):
        read_source_text("https://example.org/missing.csv", session=session)
