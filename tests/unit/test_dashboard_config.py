"""Unit tests for dashboard settings and the .env loader."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from dashboard_config import DashboardSettings, load_dotenv_if_present, load_settings
from pipeline.errors import DashboardConfigError


def test_load_settings_defaults_without_environment() -> None:
    """An empty environment should give the default settings."""
    assert load_settings({}) == DashboardSettings()
    assert load_settings({}).preferred_country == "Canada"


def test_load_settings_reads_overrides() -> None:
    """Environment values should override defaults."""
    settings = load_settings(
        {
            "DASHBOARD_PREFERRED_COUNTRY": " Brazil ",
            "DASHBOARD_TOP_N": "3",
            "DASHBOARD_AGGREGATE_DECIMALS": "1",
            "DASHBOARD_SOURCE_LABEL": "upload",
        }
    )

    assert settings.preferred_country == "Brazil"
    assert settings.top_n == 3
    assert settings.aggregate_decimals == 1
    assert settings.default_source_label == "upload"


@pytest.mark.parametrize("value", ["eight", "-1", "2.5"])
def test_load_settings_raises_for_invalid_top_n(value: str) -> None:
    """Non-integer or negative values should raise DashboardConfigError."""
    with pytest.raises(DashboardConfigError):
        load_settings({"DASHBOARD_TOP_N": value})


def test_load_dotenv_if_present_does_not_override(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """The .env loader should add missing keys only."""
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\nDASHBOARD_TOP_N=5\nexport DASHBOARD_SOURCE_LABEL=\"from file\"\n\nBROKEN\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("DASHBOARD_TOP_N", "2")
    monkeypatch.delenv("DASHBOARD_SOURCE_LABEL", raising=False)

    added = load_dotenv_if_present(env_file)

    assert added == ["DASHBOARD_SOURCE_LABEL"]
    assert os.environ["DASHBOARD_TOP_N"] == "2"
    assert os.environ["DASHBOARD_SOURCE_LABEL"] == "from file"
    monkeypatch.delenv("DASHBOARD_SOURCE_LABEL")


def test_load_dotenv_if_present_ignores_missing_file(tmp_path: Path) -> None:
    """A missing .env file should be a no-op."""
    assert load_dotenv_if_present(tmp_path / "absent.env") == []
