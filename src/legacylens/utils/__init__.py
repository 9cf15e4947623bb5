r"""Utility functions shared across legacylens."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
]

from legacylens.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)
