r"""Request and response models of the analysis service."""

from __future__ import annotations

__all__ = [
    "AnalysisResult",
    "AnalyzeRequest",
    "Column",
    "CrudOp",
    "CrudRow",
    "DocLink",
    "FileType",
    "ForeignKey",
    "Process",
    "SourceFile",
    "Table",
]

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FileType = Literal["cs", "sql", "doc"]
CrudOp = Literal["C", "R", "U", "D"]


class SourceFile(BaseModel):
    """One ingested file. ``name`` may include a path inside an
    archive."""

    name: str
    type: FileType
    content: str


class AnalyzeRequest(BaseModel):
    """The files to analyse. Without ``maxChars`` the service's own
    per-section limit applies."""

    model_config = ConfigDict(populate_by_name=True)

    files: list[SourceFile]
    max_chars: int | None = Field(default=None, alias="maxChars", gt=0)


class ForeignKey(BaseModel):
    table: str
    column: str


class Column(BaseModel):
    name: str
    type: str | None = None
    pk: bool | None = None
    fk: ForeignKey | None = None
    nullable: bool | None = None


class Table(BaseModel):
    name: str
    columns: list[Column]


class CrudRow(BaseModel):
    process: str
    table: str
    ops: list[CrudOp]


class Process(BaseModel):
    name: str
    description: str | None = None
    children: list[str] | None = None


class DocLink(BaseModel):
    doc: str
    snippet: str
    related: str


class AnalysisResult(BaseModel):
    """The structured reverse-engineering result.

    Attributes:
        tables: Table schema recovered from code and SQL.
        erd_mermaid: ER diagram source (``erDiagram ...``).
        crud_matrix: Which process creates/reads/updates/deletes which
            table.
        processes: Business processes found in the code.
        doc_links: Cross-references between documentation and code.
    """

    tables: list[Table]
    erd_mermaid: str
    crud_matrix: list[CrudRow]
    processes: list[Process]
    doc_links: list[DocLink]
