r"""Observer payload and invocation helpers for the retry executor.

The executor reports every scheduled retry to an optional observer. The
observer receives an ``AttemptInfo`` describing the next attempt, the
delay before it, and the error that caused the retry. It is meant for
logging and metrics.

Example:
    ```pycon
    >>> from legacylens.callbacks import AttemptInfo
    >>> from legacylens.retry import RetryConfig
    >>> def log_attempt(info: AttemptInfo) -> None:
    ...     print(f"attempt {info.next_attempt} in {info.delay_ms}ms: {info.error!r}")
    ...
    >>> config = RetryConfig(on_attempt=log_attempt)

    ```
"""

from __future__ import annotations

__all__ = ["AttemptInfo", "invoke_on_attempt"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class AttemptInfo:
    """Information passed to the on_attempt observer.

    Attributes:
        next_attempt: The number of the attempt about to be made
            (1 for the first retry, 2 for the second, etc.).
        delay_ms: The delay in milliseconds before the next attempt.
        error: The error that triggered the retry.
    """

    next_attempt: int
    delay_ms: int
    error: BaseException


def invoke_on_attempt(
    on_attempt: Callable[[AttemptInfo], object] | None,
    *,
    attempt: int,
    delay_ms: int,
    error: BaseException,
) -> None:
    """Invoke the on_attempt observer if provided.

    The observer is called synchronously and its return value is
    ignored.

    Args:
        on_attempt: Optional observer to invoke before a retry delay.
        attempt: The index of the attempt that just failed (0-indexed).
            The observer receives the next attempt number (attempt + 1).
        delay_ms: The delay in milliseconds before the next attempt.
        error: The error that triggered the retry.
    """
    if on_attempt is not None:
        on_attempt(AttemptInfo(next_attempt=attempt + 1, delay_ms=delay_ms, error=error))
