r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy determines how long to wait before retrying a
    failed attempt based on the attempt number.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> int:
        """Calculate the backoff delay for a given retry attempt.

        Args:
            attempt: The index of the attempt that just failed (0-indexed).
                For example, attempt=0 computes the delay before the first
                retry, attempt=1 the delay before the second retry, etc.

        Returns:
            The delay in milliseconds before the next attempt.
        """
