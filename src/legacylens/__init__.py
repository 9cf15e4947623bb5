r"""legacylens - Reverse-engineering analysis of legacy code with a
resilient LLM backend call.

This package sends legacy C# sources, SQL schemas and documentation to an
LLM service and validates the structured result it returns (tables, ER
diagram, CRUD matrix, processes, documentation cross-references). The
single outbound call is made resilient by a generic asynchronous retry
executor that can also be used on its own.

Key Features:
    - Per-attempt timeout with a fresh cancellation signal per attempt
    - Exponential backoff with jitter, capped per delay
    - Pluggable retriable-error classifier (aborts, transport codes, 429/5xx)
    - Observer hook for every scheduled retry
    - File and zip archive ingestion, prompt construction, response validation
    - FastAPI service with ``/health`` and ``/analyze``

Example:
    ```pycon
    >>> import asyncio
    >>> from legacylens import retry_async
    >>> async def call_backend(signal):
    ...     return "OK"
    ...
    >>> asyncio.run(retry_async(call_backend, retries=3, base_delay_ms=10, max_delay_ms=30))
    'OK'

    ```
"""

from __future__ import annotations

__all__ = [
    "AbortError",
    "AnalysisError",
    "AsyncRetryExecutor",
    "AttemptInfo",
    "AttemptTimeoutError",
    "CancellationReason",
    "CancellationSignal",
    "RetryConfig",
    "__version__",
    "is_retriable_error",
    "retry_async",
]

from importlib.metadata import PackageNotFoundError, version

from legacylens.callbacks import AttemptInfo
from legacylens.exceptions import AbortError, AnalysisError, AttemptTimeoutError
from legacylens.retry import (
    AsyncRetryExecutor,
    CancellationReason,
    CancellationSignal,
    RetryConfig,
    is_retriable_error,
    retry_async,
)

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
