r"""Exponential backoff strategy with additive jitter."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

import logging
import random
from typing import TYPE_CHECKING

from legacylens.backoff.base import BaseBackoffStrategy
from legacylens.core.config import (
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_JITTER_MS,
    DEFAULT_MAX_DELAY_MS,
)

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as:
    ``min(max_delay_ms, round(base_delay_ms * 2 ** attempt + jitter))``
    where ``jitter`` is drawn uniformly from ``[0, jitter_ms)``.

    If ``base_delay_ms`` is larger than ``max_delay_ms``, the base is
    clamped to the cap so that delays never decrease between attempts.

    Args:
        base_delay_ms: The initial backoff unit in milliseconds.
        max_delay_ms: The cap on any single delay in milliseconds.
        jitter_ms: The exclusive upper bound of the random jitter in
            milliseconds. Set to 0 to disable jitter.
        random_func: Source of uniform random numbers in ``[0, 1)``.
            Defaults to ``random.random``.

    Example:
        ```pycon
        >>> from legacylens.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay_ms=500, max_delay_ms=8000, jitter_ms=0)
        >>> backoff.calculate(0)
        500
        >>> backoff.calculate(1)
        1000
        >>> backoff.calculate(5)  # Would be 16000, but capped
        8000

        ```
    """

    def __init__(
        self,
        base_delay_ms: int = DEFAULT_BASE_DELAY_MS,
        max_delay_ms: int = DEFAULT_MAX_DELAY_MS,
        jitter_ms: int = DEFAULT_JITTER_MS,
        random_func: Callable[[], float] | None = None,
    ) -> None:
        if base_delay_ms < 0:
            msg = f"base_delay_ms must be non-negative, got {base_delay_ms}"
            raise ValueError(msg)
        if max_delay_ms < 0:
            msg = f"max_delay_ms must be non-negative, got {max_delay_ms}"
            raise ValueError(msg)
        if jitter_ms < 0:
            msg = f"jitter_ms must be non-negative, got {jitter_ms}"
            raise ValueError(msg)
        if base_delay_ms > max_delay_ms:
            logger.debug(f"Clamping base_delay_ms from {base_delay_ms} to {max_delay_ms}")
            base_delay_ms = max_delay_ms

        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self.jitter_ms = jitter_ms
        self.random_func = random_func if random_func is not None else random.random

    def calculate(self, attempt: int) -> int:
        """Calculate exponential backoff delay.

        Args:
            attempt: The index of the attempt that just failed (0-indexed).

        Returns:
            The delay in milliseconds, never larger than max_delay_ms.
        """
        # Past the cap, skip the float math to stay safe for huge attempts
        exponential = self.base_delay_ms * (2**attempt)
        if exponential >= self.max_delay_ms:
            return int(self.max_delay_ms)
        jitter = self.random_func() * self.jitter_ms if self.jitter_ms > 0 else 0.0
        return int(min(self.max_delay_ms, round(exponential + jitter)))
