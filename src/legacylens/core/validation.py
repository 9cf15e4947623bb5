r"""Parameter validation utilities for the retry executor.

This module provides validation functions for retry parameters to ensure
they meet the required constraints before being used by the retry
executor.
"""

from __future__ import annotations

__all__ = ["validate_retry_params", "validate_timeout_ms"]


def validate_timeout_ms(timeout_ms: float) -> None:
    """Validate the per-attempt timeout.

    Args:
        timeout_ms: Deadline of a single attempt in milliseconds.
            Must be > 0.

    Raises:
        ValueError: If timeout_ms is <= 0.

    Example:
        ```pycon
        >>> from legacylens.core.validation import validate_timeout_ms
        >>> validate_timeout_ms(150)
        >>> validate_timeout_ms(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout_ms must be > 0, got 0

        ```
    """
    if timeout_ms <= 0:
        msg = f"timeout_ms must be > 0, got {timeout_ms}"
        raise ValueError(msg)


def validate_retry_params(
    retries: int,
    base_delay_ms: float = 0,
    max_delay_ms: float = 0,
    jitter_ms: float = 0,
    timeout_ms: float | None = None,
) -> None:
    """Validate retry parameters.

    Args:
        retries: Maximum number of retries after the first attempt.
            Must be >= 0. A value of 0 means a single attempt.
        base_delay_ms: Initial backoff unit in milliseconds. Must be >= 0.
        max_delay_ms: Cap on any single backoff delay. Must be >= 0.
        jitter_ms: Upper bound (exclusive) of the random jitter added to
            each delay. Must be >= 0.
        timeout_ms: Optional per-attempt deadline. Must be > 0 if provided.

    Raises:
        TypeError: If retries is not an integer.
        ValueError: If any parameter is out of range.

    Example:
        ```pycon
        >>> from legacylens.core import validate_retry_params
        >>> validate_retry_params(retries=3)
        >>> validate_retry_params(retries=3, base_delay_ms=10, max_delay_ms=30)
        >>> validate_retry_params(retries=-1)  # doctest: +SKIP

        ```
    """
    if isinstance(retries, bool) or not isinstance(retries, int):
        msg = f"retries must be an integer, got {retries!r}"
        raise TypeError(msg)
    if retries < 0:
        msg = f"retries must be >= 0, got {retries}"
        raise ValueError(msg)
    if base_delay_ms < 0:
        msg = f"base_delay_ms must be >= 0, got {base_delay_ms}"
        raise ValueError(msg)
    if max_delay_ms < 0:
        msg = f"max_delay_ms must be >= 0, got {max_delay_ms}"
        raise ValueError(msg)
    if jitter_ms < 0:
        msg = f"jitter_ms must be >= 0, got {jitter_ms}"
        raise ValueError(msg)
    if timeout_ms is not None:
        validate_timeout_ms(timeout_ms)
