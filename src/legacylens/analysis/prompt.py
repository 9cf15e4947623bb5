r"""Prompt construction for the reverse-engineering request."""

from __future__ import annotations

__all__ = ["SYSTEM_PROMPT", "TRUNCATION_MARKER", "build_messages", "compact"]

from typing import TYPE_CHECKING

from legacylens.core.config import DEFAULT_MAX_CHARS

if TYPE_CHECKING:
    from collections.abc import Iterable

    from legacylens.analysis.models import SourceFile

TRUNCATION_MARKER = "\n/* truncated */"

SYSTEM_PROMPT = """\
You are an expert legacy C# & SQL analyst.
Return a SINGLE JSON with these keys exactly: { tables, erd_mermaid, crud_matrix, processes, doc_links }.
- erd_mermaid must be valid Mermaid ER diagram syntax: "erDiagram ...".
- crud_matrix.ops must be a subset of ["C","R","U","D"].
- Be concise but complete."""

_USER_TEMPLATE = """\
[CODE+SCHEMA START]
{code}
[CODE+SCHEMA END]

[DOCUMENTS START]
{docs}
[DOCUMENTS END]

Return only JSON. No markdown fences."""


def compact(text: str, max_chars: int) -> str:
    """Truncate ``text`` to ``max_chars`` characters and mark the cut.

    Example:
        ```pycon
        >>> from legacylens.analysis.prompt import compact
        >>> compact("abcdef", 3)
        'abc\\n/* truncated */'
        >>> compact("abc", 3)
        'abc'

        ```
    """
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def build_messages(
    files: Iterable[SourceFile], max_chars: int = DEFAULT_MAX_CHARS
) -> list[dict[str, str]]:
    """Build the chat messages sent to the LLM.

    Code and schema files go in one section, documents in another.
    Each section is truncated to ``max_chars`` separately.

    Args:
        files: The ingested source files.
        max_chars: The size limit of each section.

    Returns:
        A system message followed by a user message.
    """
    files = list(files)
    code = "\n\n".join(f"// {f.name}\n{f.content}" for f in files if f.type != "doc")
    docs = "\n\n".join(f"# {f.name}\n{f.content}" for f in files if f.type == "doc")
    user = _USER_TEMPLATE.format(code=compact(code, max_chars), docs=compact(docs, max_chars))
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user},
    ]
