r"""Offline analyzer returning a fixed, realistic analysis result.

It is injected instead of the LLM client (``USE_MOCK_ANALYZER=true``)
for local development and demos.
"""

from __future__ import annotations

__all__ = ["MOCK_RESULT", "MockAnalyzer"]

import logging
from typing import TYPE_CHECKING

from legacylens.analysis.models import AnalysisResult
from legacylens.core.config import DEFAULT_MAX_CHARS

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType
    from typing import Self

    from legacylens.analysis.models import SourceFile

logger: logging.Logger = logging.getLogger(__name__)

_ERD = """\
erDiagram
  Users {
    int Id PK
    nvarchar Name
    nvarchar Email
    datetime CreatedAt
  }

  Orders {
    int Id PK
    int UserId FK
    datetime OrderDate
    decimal TotalAmount
  }

  Products {
    int Id PK
    nvarchar Name
    decimal Price
    int Stock
  }

  OrderItems {
    int Id PK
    int OrderId FK
    int ProductId FK
    int Quantity
    datetime LastUpdated
  }

  Payments {
    int Id PK
    int OrderId FK
    decimal Amount
    datetime PaymentDate
    nvarchar Method
  }

  Users ||--o{ Orders : places
  Orders ||--o{ OrderItems : contains
  Products ||--o{ OrderItems : listed
  Orders ||--o{ Payments : paid_by"""


def _pk(name: str) -> dict:
    return {"name": name, "type": "int", "pk": True, "nullable": False}


def _fk(name: str, table: str) -> dict:
    return {"name": name, "type": "int", "fk": {"table": table, "column": "Id"}, "nullable": True}


def _col(name: str, type_: str, nullable: bool = True) -> dict:
    return {"name": name, "type": type_, "nullable": nullable}


MOCK_RESULT = AnalysisResult.model_validate(
    {
        "tables": [
            {
                "name": "Users",
                "columns": [
                    _pk("Id"),
                    _col("Name", "nvarchar(100)", nullable=False),
                    _col("Email", "nvarchar(200)"),
                    _col("CreatedAt", "datetime"),
                ],
            },
            {
                "name": "Orders",
                "columns": [
                    _pk("Id"),
                    _fk("UserId", "Users"),
                    _col("OrderDate", "datetime"),
                    _col("TotalAmount", "decimal(10,2)"),
                ],
            },
            {
                "name": "Products",
                "columns": [
                    _pk("Id"),
                    _col("Name", "nvarchar(200)"),
                    _col("Price", "decimal(10,2)"),
                    _col("Stock", "int"),
                ],
            },
            {
                "name": "OrderItems",
                "columns": [
                    _pk("Id"),
                    _fk("OrderId", "Orders"),
                    _fk("ProductId", "Products"),
                    _col("Quantity", "int"),
                    _col("LastUpdated", "datetime"),
                ],
            },
            {
                "name": "Payments",
                "columns": [
                    _pk("Id"),
                    _fk("OrderId", "Orders"),
                    _col("Amount", "decimal(10,2)"),
                    _col("PaymentDate", "datetime"),
                    _col("Method", "nvarchar(50)"),
                ],
            },
        ],
        "erd_mermaid": _ERD,
        "crud_matrix": [
            {"process": "User Registration", "table": "Users", "ops": ["C", "R", "U"]},
            {"process": "Place Order", "table": "Orders", "ops": ["C", "R", "U"]},
            {"process": "Place Order", "table": "OrderItems", "ops": ["C", "R", "U"]},
            {"process": "Payment", "table": "Payments", "ops": ["C", "R"]},
            {"process": "Inventory", "table": "Products", "ops": ["R", "U"]},
        ],
        "processes": [
            {"name": "User Registration", "description": "Register users and create accounts"},
            {"name": "Place Order", "description": "Create orders and add order items"},
            {"name": "Payment", "description": "Process order payments"},
            {"name": "Inventory", "description": "Manage product stock"},
        ],
        "doc_links": [
            {
                "doc": "manual.txt",
                "snippet": "User registration and ordering flow",
                "related": "Users, Orders",
            },
            {
                "doc": "operations.txt",
                "snippet": "Stock handling and payment processing",
                "related": "Inventory, Payments",
            },
        ],
    }
)


class MockAnalyzer:
    """Analyzer ignoring its input and returning a copy of
    ``MOCK_RESULT``."""

    model = "mock"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        return None

    async def analyze(
        self, files: Sequence[SourceFile], max_chars: int = DEFAULT_MAX_CHARS
    ) -> AnalysisResult:
        logger.debug(f"Returning mock analysis for {len(files)} file(s)")
        return MOCK_RESULT.model_copy(deep=True)
