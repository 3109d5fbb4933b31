from __future__ import annotations

import random
import time
from typing import Mapping, Optional, Sequence

import requests

TRANSIENT_STATUS_CODES = (429, 500, 502, 503, 504)


def _compute_sleep_seconds(
    attempt: int,
    *,
    backoff_base: float,
    backoff_max: float,
) -> float:
    # Exponential backoff with jitter
    base = backoff_base * (2 ** max(0, attempt - 1))
    jitter = random.uniform(0, backoff_base)
    return min(backoff_max, base + jitter)


def _retry_after_seconds(resp: requests.Response) -> Optional[float]:
    value = resp.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


def http_get_with_retries(
    url: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    timeout: int = 30,
    max_attempts: int = 4,
    backoff_base: float = 0.5,
    backoff_max: float = 8.0,
    status_forcelist: Sequence[int] = TRANSIENT_STATUS_CODES,
    session: Optional[requests.Session] = None,
) -> requests.Response:
    """
    GET a CSV source, retrying transient failures.

    Retries on connection/timeout errors and on HTTP statuses listed in
    `status_forcelist`, sleeping with exponential backoff plus jitter (or
    the server's `Retry-After`). The final response is returned as-is; the
    caller decides what to do with non-2xx statuses.
    """
    getter = session.get if session is not None else requests.get
    attempt = 0
    last_exc: Exception | None = None
    while attempt < max_attempts:
        attempt += 1
        try:
            resp = getter(url, headers=headers, timeout=timeout)
        except (requests.exceptions.Timeout,
                requests.exceptions.ConnectionError,
                requests.exceptions.ChunkedEncodingError) as exc:
            last_exc = exc
            if attempt >= max_attempts:
                break
            print(f"[retry] {url}: {exc.__class__.__name__}, attempt {attempt}/{max_attempts}")
            time.sleep(
                _compute_sleep_seconds(attempt, backoff_base=backoff_base, backoff_max=backoff_max)
            )
            continue

        if resp.status_code in status_forcelist and attempt < max_attempts:
            sleep_sec = _retry_after_seconds(resp)
            if sleep_sec is None:
                sleep_sec = _compute_sleep_seconds(
                    attempt, backoff_base=backoff_base, backoff_max=backoff_max
                )
            print(f"[retry] {url}: HTTP {resp.status_code}, attempt {attempt}/{max_attempts}")
            time.sleep(sleep_sec)
            continue
        return resp

    # Exhausted attempts on transient errors
    assert last_exc is not None
    raise last_exc


__all__ = ["TRANSIENT_STATUS_CODES", "http_get_with_retries"]
