from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from tests.helpers import FlakyOperation, make_transport_error

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Generator

    from legacylens.retry import CancellationSignal


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing observers."""
    return Mock()


@pytest.fixture
def flaky() -> Callable[..., FlakyOperation]:
    """Factory of operations failing a given number of times with a
    retriable transport error."""

    def factory(
        fail_times: int,
        result: object = "OK",
        error_factory: Callable[[], Exception] = make_transport_error,
    ) -> FlakyOperation:
        return FlakyOperation(fail_times, result, error_factory)

    return factory


@pytest.fixture
def never_settles() -> Callable[[CancellationSignal], Awaitable[None]]:
    """Operation that never completes on its own."""
    calls: list[CancellationSignal] = []

    async def operation(signal: CancellationSignal) -> None:
        calls.append(signal)
        await asyncio.get_running_loop().create_future()

    operation.calls = calls  # type: ignore[attr-defined]
    return operation
