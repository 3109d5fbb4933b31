"""
Runtime settings for the dashboard pipeline.

Settings come from environment variables, optionally seeded from a local
`.env` file during development:

- DASHBOARD_PREFERRED_COUNTRY
    Country selected by default when the prior selection is empty or no
    longer present (default: "Canada").
- DASHBOARD_TOP_N
    Size of the population ranking (default: 8).
- DASHBOARD_AGGREGATE_DECIMALS
    Decimal places kept in the global yearly means (default: 2).
- DASHBOARD_SOURCE_LABEL
    Label shown for a dataset loaded without a file name
    (default: "environment dataset").
- DASHBOARD_HTTP_TIMEOUT
    Timeout in seconds when the CSV source is a URL (default: 30).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from pipeline.errors import DashboardConfigError
from pipeline.selection_resolver import DEFAULT_PREFERRED_COUNTRY

PREFERRED_COUNTRY_ENV = "DASHBOARD_PREFERRED_COUNTRY"
TOP_N_ENV = "DASHBOARD_TOP_N"
AGGREGATE_DECIMALS_ENV = "DASHBOARD_AGGREGATE_DECIMALS"
SOURCE_LABEL_ENV = "DASHBOARD_SOURCE_LABEL"
HTTP_TIMEOUT_ENV = "DASHBOARD_HTTP_TIMEOUT"

DEFAULT_TOP_N = 8
DEFAULT_AGGREGATE_DECIMALS = 2
DEFAULT_SOURCE_LABEL = "environment dataset"
DEFAULT_HTTP_TIMEOUT = 30


def load_dotenv_if_present(path: str | Path | None = None) -> List[str]:
    """
    Seed os.environ from a `.env` file, if one exists.

    - Reads KEY=VALUE pairs (default file: ".env" in the CWD).
    - Ignores blank lines and "#" comments; strips matching quotes.
    - Never overwrites variables that are already set.

    Returns the keys that were added.
    """
    env_path = Path(path or ".env")
    if not env_path.is_file():
        return []

    try:
        text = env_path.read_text(encoding="utf-8")
    except OSError:
        return []

    added: List[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export "):].strip()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        if key and key not in os.environ:
            os.environ[key] = value
            added.append(key)
    return added


@dataclass(frozen=True)
class DashboardSettings:
    preferred_country: str = DEFAULT_PREFERRED_COUNTRY
    top_n: int = DEFAULT_TOP_N
    aggregate_decimals: int = DEFAULT_AGGREGATE_DECIMALS
    default_source_label: str = DEFAULT_SOURCE_LABEL
    http_timeout: int = DEFAULT_HTTP_TIMEOUT


def _read_non_negative_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise DashboardConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 0:
        raise DashboardConfigError(f"{name} must be >= 0, got {value}")
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> DashboardSettings:
    """Build DashboardSettings from `environ` (os.environ by default)."""
    env = os.environ if environ is None else environ
    return DashboardSettings(
        preferred_country=(env.get(PREFERRED_COUNTRY_ENV) or DEFAULT_PREFERRED_COUNTRY).strip(),
        top_n=_read_non_negative_int(env, TOP_N_ENV, DEFAULT_TOP_N),
        aggregate_decimals=_read_non_negative_int(
            env, AGGREGATE_DECIMALS_ENV, DEFAULT_AGGREGATE_DECIMALS
        ),
        default_source_label=env.get(SOURCE_LABEL_ENV) or DEFAULT_SOURCE_LABEL,
        http_timeout=_read_non_negative_int(env, HTTP_TIMEOUT_ENV, DEFAULT_HTTP_TIMEOUT),
    )


__all__ = [
    "PREFERRED_COUNTRY_ENV",
    "TOP_N_ENV",
    "AGGREGATE_DECIMALS_ENV",
    "SOURCE_LABEL_ENV",
    "HTTP_TIMEOUT_ENV",
    "DEFAULT_PREFERRED_COUNTRY",
    "DashboardSettings",
    "load_dotenv_if_present",
    "load_settings",
]
