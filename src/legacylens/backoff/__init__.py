r"""Backoff strategies for retry delays.

This package provides the strategies used to compute the delay, in
milliseconds, between two attempts of the retry executor.
"""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "ExponentialBackoff"]

from legacylens.backoff.base import BaseBackoffStrategy
from legacylens.backoff.exponential import ExponentialBackoff
