r"""Per-attempt cancellation signal.

The retry executor hands a fresh ``CancellationSignal`` to every attempt
of an operation. The executor triggers it only when that attempt's
deadline fires, with reason ``CancellationReason.TIMEOUT``. Callers may
trigger it themselves with ``CancellationReason.ABORT``, and the two
causes stay distinguishable.
"""

from __future__ import annotations

__all__ = ["CancellationReason", "CancellationSignal"]

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING

from legacylens.exceptions import AttemptTimeoutError, OperationAbortedError

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class CancellationReason(Enum):
    """Why a cancellation signal was triggered.

    Attributes:
        TIMEOUT: The attempt's deadline expired.
        ABORT: The operation was deliberately aborted.
    """

    TIMEOUT = "timeout"
    ABORT = "abort"


class CancellationSignal:
    r"""Cancellation channel scoped to a single attempt.

    Triggering is idempotent and the first reason wins. Registered
    callbacks run synchronously, once, when the signal is triggered.

    Example:
        ```pycon
        >>> from legacylens.retry.signal import CancellationReason, CancellationSignal
        >>> signal = CancellationSignal()
        >>> signal.cancelled
        False
        >>> signal.cancel(CancellationReason.TIMEOUT)
        >>> signal.cancel(CancellationReason.ABORT)  # no-op
        >>> signal.reason
        <CancellationReason.TIMEOUT: 'timeout'>
        >>> signal.is_timeout
        True

        ```
    """

    def __init__(self) -> None:
        self._reason: CancellationReason | None = None
        self._event: asyncio.Event | None = None
        self._callbacks: list[Callable[[CancellationReason], object]] = []

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(reason={self._reason})"

    @property
    def cancelled(self) -> bool:
        """Indicate whether the signal was triggered."""
        return self._reason is not None

    @property
    def reason(self) -> CancellationReason | None:
        """The reason the signal was triggered, or ``None``."""
        return self._reason

    @property
    def is_timeout(self) -> bool:
        """Indicate whether the signal was triggered by a deadline."""
        return self._reason is CancellationReason.TIMEOUT

    def cancel(self, reason: CancellationReason = CancellationReason.ABORT) -> None:
        """Trigger the signal.

        Args:
            reason: Why the signal is triggered. Ignored if the signal
                was already triggered.
        """
        if self._reason is not None:
            return
        self._reason = reason
        logger.debug(f"Cancellation signal triggered ({reason.value})")
        if self._event is not None:
            self._event.set()
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(reason)

    def add_callback(self, callback: Callable[[CancellationReason], object]) -> None:
        """Register a callback run when the signal is triggered.

        If the signal was already triggered, the callback runs
        immediately.

        Args:
            callback: Function receiving the cancellation reason.
        """
        if self._reason is not None:
            callback(self._reason)
            return
        self._callbacks.append(callback)

    async def wait(self) -> CancellationReason:
        """Wait until the signal is triggered.

        Returns:
            The cancellation reason.
        """
        if self._reason is None:
            if self._event is None:
                self._event = asyncio.Event()
            await self._event.wait()
        return self._reason

    def raise_if_cancelled(self) -> None:
        """Raise the abort-class error matching the signal state.

        Raises:
            AttemptTimeoutError: If the signal was triggered by a deadline.
            OperationAbortedError: If the signal was triggered by an abort.
        """
        if self._reason is CancellationReason.TIMEOUT:
            raise AttemptTimeoutError
        if self._reason is CancellationReason.ABORT:
            raise OperationAbortedError
