r"""Configuration dataclass for retry behavior."""

from __future__ import annotations

__all__ = ["RetryConfig"]

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from legacylens.backoff.exponential import ExponentialBackoff
from legacylens.core.config import (
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_JITTER_MS,
    DEFAULT_MAX_DELAY_MS,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT_MS,
)
from legacylens.core.validation import validate_retry_params
from legacylens.retry.classifier import is_retriable_error

if TYPE_CHECKING:
    from collections.abc import Callable

    from legacylens.backoff.base import BaseBackoffStrategy
    from legacylens.callbacks import AttemptInfo


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    All fields are optional and take the defaults from
    ``legacylens.core.config``.

    Args:
        retries: Maximum number of retries after the first attempt.
            Total attempts = retries + 1. Must be >= 0.
        base_delay_ms: Initial backoff unit in milliseconds. Must be >= 0.
        max_delay_ms: Cap on any single backoff delay in milliseconds.
            Must be >= 0.
        timeout_ms: Deadline of a single attempt in milliseconds. Must be > 0.
        jitter_ms: Exclusive upper bound of the random jitter added to
            each delay, in milliseconds. Must be >= 0.
        is_retriable: Optional predicate classifying an error as transient.
            Defaults to ``is_retriable_error``.
        on_attempt: Optional observer invoked once per scheduled retry.
        backoff_strategy: Optional custom backoff strategy. Defaults to an
            ``ExponentialBackoff`` built from the delay fields.

    Example:
        ```pycon
        >>> from legacylens.retry import RetryConfig
        >>> config = RetryConfig()
        >>> config.retries
        3
        >>> config.timeout_ms
        30000
        >>> config.merge(retries=5).retries
        5

        ```
    """

    retries: int = DEFAULT_RETRIES
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS
    max_delay_ms: int = DEFAULT_MAX_DELAY_MS
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    jitter_ms: int = DEFAULT_JITTER_MS
    is_retriable: Callable[[BaseException], bool] | None = None
    on_attempt: Callable[[AttemptInfo], object] | None = None
    backoff_strategy: BaseBackoffStrategy | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            TypeError: If retries is not an integer.
            ValueError: If any parameter fails validation.
        """
        validate_retry_params(
            retries=self.retries,
            base_delay_ms=self.base_delay_ms,
            max_delay_ms=self.max_delay_ms,
            jitter_ms=self.jitter_ms,
            timeout_ms=self.timeout_ms,
        )

    @property
    def classifier(self) -> Callable[[BaseException], bool]:
        """The retriable-error predicate in effect."""
        return self.is_retriable if self.is_retriable is not None else is_retriable_error

    def build_backoff(self) -> BaseBackoffStrategy:
        """Return the backoff strategy in effect."""
        if self.backoff_strategy is not None:
            return self.backoff_strategy
        return ExponentialBackoff(
            base_delay_ms=self.base_delay_ms,
            max_delay_ms=self.max_delay_ms,
            jitter_ms=self.jitter_ms,
        )

    def merge(self, **overrides: Any) -> RetryConfig:
        """Create a new config with the given parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new RetryConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
