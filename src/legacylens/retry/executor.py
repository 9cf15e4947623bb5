r"""Asynchronous retry executor.

This module provides the AsyncRetryExecutor class that drives repeated
attempts of a caller-supplied async operation, enforcing a per-attempt
deadline, classifying failures as retriable or terminal, and waiting
with exponential backoff between attempts.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor", "retry_async"]

import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from legacylens.callbacks import invoke_on_attempt
from legacylens.exceptions import AttemptTimeoutError, OperationAbortedError
from legacylens.retry.config import RetryConfig
from legacylens.retry.signal import CancellationReason, CancellationSignal

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


def _discard_outcome(future: asyncio.Future) -> None:
    # Mark the loser's exception as retrieved so asyncio does not report it
    if not future.cancelled():
        future.exception()


class AsyncRetryExecutor:
    """Executes an async operation with automatic retry logic.

    Each attempt receives a fresh ``CancellationSignal`` and is raced
    against a deadline of ``config.timeout_ms``. The first of the two to
    settle decides the attempt; the other one is discarded. On failure
    the error is classified, and the attempt is either retried after a
    backoff delay or the error is propagated unmodified.

    Attributes:
        config: Retry configuration.
        backoff: Strategy for calculating the delay between attempts.
        is_retriable: Predicate classifying errors as retriable.

    Example:
        ```pycon
        >>> import asyncio
        >>> from legacylens.retry import AsyncRetryExecutor, RetryConfig
        >>> async def fetch(signal):
        ...     return "OK"
        ...
        >>> executor = AsyncRetryExecutor(RetryConfig(retries=2, timeout_ms=1000))
        >>> asyncio.run(executor.execute(fetch))
        'OK'

        ```
    """

    def __init__(self, config: RetryConfig | None = None) -> None:
        self.config = config if config is not None else RetryConfig()
        self.backoff = self.config.build_backoff()
        self.is_retriable = self.config.classifier

    async def execute(self, operation: Callable[[CancellationSignal], Awaitable[T]]) -> T:
        """Execute the operation with automatic retry logic.

        Makes up to ``retries + 1`` attempts. A success returns
        immediately. A failure on the last attempt, or a failure the
        classifier rejects, is raised as is. Otherwise the observer is
        notified and the executor sleeps before the next attempt.

        Args:
            operation: Async function receiving the attempt's
                cancellation signal and returning the result.

        Returns:
            The value returned by the first successful attempt.

        Raises:
            AttemptTimeoutError: If the last attempt timed out.
            OperationAbortedError: If the last attempt cancelled itself
                (it raised ``asyncio.CancelledError`` without the caller
                being cancelled).
            Exception: The error raised by the last attempt, or the
                first error classified as terminal.
        """
        retries = self.config.retries
        for attempt in range(retries + 1):
            try:
                return await self._run_attempt(operation, attempt)
            except Exception as exc:
                if attempt == retries:
                    logger.debug(f"Attempt {attempt + 1}/{retries + 1} failed, retries exhausted: {exc!r}")
                    raise
                if not self.is_retriable(exc):
                    logger.debug(f"Attempt {attempt + 1}/{retries + 1} failed with terminal error: {exc!r}")
                    raise

                delay_ms = self.backoff.calculate(attempt)
                logger.debug(
                    f"Attempt {attempt + 1}/{retries + 1} failed ({type(exc).__name__}), "
                    f"retrying in {delay_ms}ms"
                )
                invoke_on_attempt(
                    self.config.on_attempt, attempt=attempt, delay_ms=delay_ms, error=exc
                )
                await asyncio.sleep(delay_ms / 1000)

        msg = "unreachable: the retry loop always returns or raises"  # pragma: no cover
        raise RuntimeError(msg)  # pragma: no cover

    async def _run_attempt(
        self, operation: Callable[[CancellationSignal], Awaitable[T]], attempt: int
    ) -> T:
        loop = asyncio.get_running_loop()
        signal = CancellationSignal()
        outcome: asyncio.Future = loop.create_future()
        decided = False

        async def invoke() -> T:
            return await operation(signal)

        task = asyncio.ensure_future(invoke())

        def on_deadline() -> None:
            nonlocal decided
            if decided:
                return
            decided = True
            logger.debug(f"Attempt {attempt + 1} exceeded {self.config.timeout_ms}ms")
            signal.cancel(CancellationReason.TIMEOUT)
            task.cancel()
            outcome.set_exception(AttemptTimeoutError())

        def on_operation_done(done: asyncio.Future) -> None:
            nonlocal decided
            if decided:
                _discard_outcome(done)
                return
            decided = True
            deadline.cancel()
            if done.cancelled():
                # The executor only cancels decided attempts, so the
                # operation cancelled itself (e.g. an awaited inner task)
                outcome.set_exception(OperationAbortedError("operation was cancelled"))
            elif done.exception() is not None:
                outcome.set_exception(done.exception())
            else:
                outcome.set_result(done.result())

        deadline = loop.call_later(self.config.timeout_ms / 1000, on_deadline)
        task.add_done_callback(on_operation_done)
        try:
            return await outcome
        finally:
            decided = True
            deadline.cancel()
            if not task.done():
                task.cancel()


async def retry_async(
    operation: Callable[[CancellationSignal], Awaitable[T]],
    config: RetryConfig | None = None,
    **overrides: Any,
) -> T:
    """Execute an async operation with automatic retry logic.

    Convenience wrapper around ``AsyncRetryExecutor``.

    Args:
        operation: Async function receiving the attempt's cancellation
            signal and returning the result.
        config: Optional retry configuration. Defaults to ``RetryConfig()``.
        **overrides: Configuration fields overriding ``config``
            (e.g. ``retries=5``). ``None`` values are ignored.

    Returns:
        The value returned by the first successful attempt.

    Example:
        ```pycon
        >>> import asyncio
        >>> from legacylens.retry import retry_async
        >>> async def fetch(signal):
        ...     return 42
        ...
        >>> asyncio.run(retry_async(fetch, retries=1, base_delay_ms=10))
        42

        ```
    """
    config = config if config is not None else RetryConfig()
    if overrides:
        config = config.merge(**overrides)
    return await AsyncRetryExecutor(config).execute(operation)
