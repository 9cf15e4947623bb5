r"""Shared test helpers for the retry and analysis tests.

This module contains the failing operations, error factories and
backend responses used across multiple test files.
"""

from __future__ import annotations

__all__ = [
    "SAMPLE_FILES",
    "VALID_RESULT",
    "FlakyOperation",
    "completion_body",
    "make_status_error",
    "make_transport_error",
]

import errno
import json
from typing import TYPE_CHECKING, Any

from legacylens.analysis.models import SourceFile

if TYPE_CHECKING:
    from collections.abc import Callable

    from legacylens.retry import CancellationSignal


SAMPLE_FILES = [
    SourceFile(
        name="OrderService.cs",
        type="cs",
        content="public class OrderService { void Create() { db.Orders.Add(o); } }",
    ),
    SourceFile(
        name="schema.sql",
        type="sql",
        content="CREATE TABLE Orders (OrderId INT PRIMARY KEY, UserId INT);",
    ),
    SourceFile(name="README.md", type="doc", content="Orders are created by the order service."),
]

VALID_RESULT: dict[str, Any] = {
    "tables": [
        {
            "name": "Orders",
            "columns": [
                {"name": "OrderId", "type": "INT", "pk": True},
                {"name": "UserId", "type": "INT", "fk": {"table": "Users", "column": "UserId"}},
            ],
        }
    ],
    "erd_mermaid": "erDiagram\n  Users ||--o{ Orders : places",
    "crud_matrix": [{"process": "CreateOrder", "table": "Orders", "ops": ["C"]}],
    "processes": [{"name": "CreateOrder", "description": "Creates an order"}],
    "doc_links": [
        {"doc": "README.md", "snippet": "Orders are created", "related": "OrderService.Create"}
    ],
}


class FlakyOperation:
    """Async operation failing ``fail_times`` times before returning
    ``result``.

    Attributes:
        calls: Number of invocations so far.
        signals: The cancellation signal received by each invocation.
    """

    def __init__(
        self, fail_times: int, result: object, error_factory: Callable[[], Exception]
    ) -> None:
        self.fail_times = fail_times
        self.result = result
        self.error_factory = error_factory
        self.calls = 0
        self.signals: list[CancellationSignal] = []

    async def __call__(self, signal: CancellationSignal) -> object:
        self.calls += 1
        self.signals.append(signal)
        if self.calls <= self.fail_times:
            raise self.error_factory()
        return self.result


def make_transport_error(code: str = "ETIMEDOUT") -> Exception:
    """Create a transport error carrying a string ``code``."""
    err = OSError(errno.EIO, "temporary")
    err.code = code  # type: ignore[attr-defined]
    return err


def make_status_error(status: int, message: str = "http error") -> Exception:
    """Create an error carrying an HTTP ``status``."""
    err = RuntimeError(message)
    err.status = status  # type: ignore[attr-defined]
    return err


def completion_body(content: object) -> dict[str, Any]:
    """Create a chat completion body whose message content is
    ``content``, JSON-encoded unless it is already a string."""
    if not isinstance(content, str):
        content = json.dumps(content)
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}
