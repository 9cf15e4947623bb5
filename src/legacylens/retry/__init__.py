r"""Retry package for resilient execution of async operations.

Public API:
    - RetryConfig: Configuration for retry behavior
    - AsyncRetryExecutor: Asynchronous retry executor
    - retry_async: Functional shortcut around AsyncRetryExecutor
    - CancellationSignal: Per-attempt cancellation channel
    - CancellationReason: Why a cancellation signal was triggered
    - is_retriable_error: Default retriable-error classifier
"""

from __future__ import annotations

__all__ = [
    "AsyncRetryExecutor",
    "CancellationReason",
    "CancellationSignal",
    "RetryConfig",
    "is_retriable_error",
    "retry_async",
]

from legacylens.retry.classifier import is_retriable_error
from legacylens.retry.config import RetryConfig
from legacylens.retry.executor import AsyncRetryExecutor, retry_async
from legacylens.retry.signal import CancellationReason, CancellationSignal
