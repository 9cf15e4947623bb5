r"""File ingestion: turn uploaded files and zip archives into source
files."""

from __future__ import annotations

__all__ = ["DEFAULT_ZIP_TYPES", "estimate_bytes", "infer_file_type", "ingest_file", "read_files"]

import io
import logging
import zipfile
from pathlib import Path
from typing import TYPE_CHECKING

from legacylens.analysis.models import FileType, SourceFile

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

logger: logging.Logger = logging.getLogger(__name__)

# Only code and schema files are taken out of archives by default
DEFAULT_ZIP_TYPES: tuple[FileType, ...] = ("cs", "sql")


def infer_file_type(name: str) -> FileType:
    """Infer the file type from its name.

    Example:
        ```pycon
        >>> from legacylens.analysis.ingest import infer_file_type
        >>> infer_file_type("Orders.CS"), infer_file_type("schema.sql"), infer_file_type("manual.txt")
        ('cs', 'sql', 'doc')

        ```
    """
    lowered = name.lower()
    if lowered.endswith(".cs"):
        return "cs"
    if lowered.endswith(".sql"):
        return "sql"
    return "doc"


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def ingest_file(
    name: str,
    data: bytes,
    allow_zip_types: Sequence[FileType] = DEFAULT_ZIP_TYPES,
) -> list[SourceFile]:
    """Convert the raw content of one uploaded file to source files.

    A ``.zip`` file is expanded: every non-directory entry whose
    inferred type is in ``allow_zip_types`` becomes a source file named
    after its path inside the archive. Any other file becomes a single
    source file.

    Args:
        name: The uploaded file name.
        data: The raw file content.
        allow_zip_types: File types kept when expanding an archive.

    Returns:
        The ingested source files.

    Raises:
        zipfile.BadZipFile: If a ``.zip`` file is not a valid archive.
    """
    if not name.lower().endswith(".zip"):
        return [SourceFile(name=name, type=infer_file_type(name), content=_decode(data))]

    files: list[SourceFile] = []
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        for entry in archive.infolist():
            if entry.is_dir():
                continue
            file_type = infer_file_type(entry.filename)
            if file_type not in allow_zip_types:
                logger.debug(f"Skipping {entry.filename} in {name} (type {file_type})")
                continue
            files.append(
                SourceFile(
                    name=entry.filename, type=file_type, content=_decode(archive.read(entry))
                )
            )
    logger.debug(f"Extracted {len(files)} file(s) from {name}")
    return files


def read_files(
    paths: Iterable[str | Path],
    allow_zip_types: Sequence[FileType] = DEFAULT_ZIP_TYPES,
) -> list[SourceFile]:
    """Read files from disk and ingest them in order.

    Args:
        paths: The paths of the files to read.
        allow_zip_types: File types kept when expanding archives.

    Returns:
        The ingested source files.
    """
    files: list[SourceFile] = []
    for path in map(Path, paths):
        files.extend(ingest_file(path.name, path.read_bytes(), allow_zip_types))
    return files


def estimate_bytes(files: Iterable[SourceFile]) -> int:
    """Return the UTF-8 size of all file contents joined by newlines.

    Example:
        ```pycon
        >>> from legacylens.analysis.ingest import estimate_bytes
        >>> from legacylens.analysis.models import SourceFile
        >>> estimate_bytes([SourceFile(name="a.cs", type="cs", content="ab"),
        ...                 SourceFile(name="b.cs", type="cs", content="c")])
        4

        ```
    """
    return len("\n".join(f.content for f in files).encode("utf-8"))
