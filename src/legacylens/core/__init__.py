r"""Core defaults and parameter validation shared across legacylens."""

from __future__ import annotations

__all__ = [
    "DEFAULT_BASE_DELAY_MS",
    "DEFAULT_JITTER_MS",
    "DEFAULT_MAX_CHARS",
    "DEFAULT_MAX_DELAY_MS",
    "DEFAULT_MAX_PAYLOAD_BYTES",
    "DEFAULT_RETRIES",
    "DEFAULT_TIMEOUT_MS",
    "RETRIABLE_TRANSPORT_CODES",
    "RETRY_STATUS_CODES",
    "validate_retry_params",
    "validate_timeout_ms",
]

from legacylens.core.config import (
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_JITTER_MS,
    DEFAULT_MAX_CHARS,
    DEFAULT_MAX_DELAY_MS,
    DEFAULT_MAX_PAYLOAD_BYTES,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT_MS,
    RETRIABLE_TRANSPORT_CODES,
    RETRY_STATUS_CODES,
)
from legacylens.core.validation import validate_retry_params, validate_timeout_ms
