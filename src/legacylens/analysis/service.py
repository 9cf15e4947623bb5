r"""Analysis service: payload guards in front of an injected analyzer."""

from __future__ import annotations

__all__ = ["AnalysisService", "Analyzer"]

import logging
from typing import TYPE_CHECKING, Protocol

from legacylens.analysis.ingest import estimate_bytes
from legacylens.core.config import DEFAULT_MAX_CHARS, DEFAULT_MAX_PAYLOAD_BYTES
from legacylens.exceptions import PayloadTooLargeError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType
    from typing import Self

    from legacylens.analysis.models import AnalysisResult, AnalyzeRequest, SourceFile

logger: logging.Logger = logging.getLogger(__name__)


class Analyzer(Protocol):
    """What the service needs from an analyzer (LLM client or mock)."""

    model: str

    async def __aenter__(self) -> Self: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...

    async def analyze(
        self, files: Sequence[SourceFile], max_chars: int = DEFAULT_MAX_CHARS
    ) -> AnalysisResult: ...


class AnalysisService:
    """Validate analysis requests and delegate them to an analyzer.

    Args:
        analyzer: The analyzer doing the actual work.
        max_payload_bytes: The UTF-8 size limit of all file contents.
        default_max_chars: The per-section prompt limit used when a
            request does not set ``maxChars``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from legacylens.analysis import AnalysisService, AnalyzeRequest, MockAnalyzer
        >>> service = AnalysisService(MockAnalyzer())
        >>> result = asyncio.run(service.analyze(AnalyzeRequest(files=[])))
        >>> [table.name for table in result.tables][:2]
        ['Users', 'Orders']

        ```
    """

    def __init__(
        self,
        analyzer: Analyzer,
        *,
        max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES,
        default_max_chars: int = DEFAULT_MAX_CHARS,
    ) -> None:
        self.analyzer = analyzer
        self.max_payload_bytes = max_payload_bytes
        self.default_max_chars = default_max_chars

    @property
    def model(self) -> str:
        return self.analyzer.model

    def check_payload(self, files: Sequence[SourceFile]) -> int:
        """Check the payload size limit.

        Returns:
            The payload size in bytes.

        Raises:
            PayloadTooLargeError: If the payload exceeds the limit.
        """
        size = estimate_bytes(files)
        if size > self.max_payload_bytes:
            limit_mb = self.max_payload_bytes / (1024 * 1024)
            msg = f"Total file size exceeds {limit_mb:g}MB."
            raise PayloadTooLargeError(msg)
        return size

    async def analyze(self, request: AnalyzeRequest) -> AnalysisResult:
        size = self.check_payload(request.files)
        logger.info(f"Analyzing {len(request.files)} file(s), {size} bytes, with {self.model}")
        max_chars = self.default_max_chars if request.max_chars is None else request.max_chars
        return await self.analyzer.analyze(request.files, max_chars)
