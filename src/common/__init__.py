"""Shared helpers used by more than one layer."""

from .retry import TRANSIENT_STATUS_CODES, http_get_with_retries  # noqa: F401

__all__ = ["TRANSIENT_STATUS_CODES", "http_get_with_retries"]
