r"""Asynchronous client for the LLM analysis backend.

This module provides the AsyncAnalysisClient class that sends the
reverse-engineering prompt to an OpenAI-compatible chat completions
endpoint. The HTTP call goes through ``AsyncRetryExecutor``; parsing
and validating the answer happens once, outside the retry loop.
"""

from __future__ import annotations

__all__ = ["DEFAULT_BASE_URL", "DEFAULT_MODEL", "AsyncAnalysisClient", "parse_analysis_result"]

import json
import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from legacylens.analysis.models import AnalysisResult
from legacylens.analysis.prompt import build_messages
from legacylens.core.config import DEFAULT_MAX_CHARS
from legacylens.exceptions import ResponseValidationError, UpstreamResponseError
from legacylens.retry import AsyncRetryExecutor, RetryConfig

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType
    from typing import Self

    from legacylens.analysis.models import SourceFile
    from legacylens.callbacks import AttemptInfo
    from legacylens.retry import CancellationSignal

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"


def parse_analysis_result(completion: dict[str, Any]) -> AnalysisResult:
    """Extract and validate the analysis result from a chat completion.

    Args:
        completion: The decoded chat completion body.

    Returns:
        The validated analysis result.

    Raises:
        UpstreamResponseError: If the message content is not JSON.
        ResponseValidationError: If the JSON does not match the result
            schema.
    """
    try:
        raw = completion["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raw = None
    if raw is None:
        raw = "{}"

    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        msg = "LLM returned non-JSON."
        raise UpstreamResponseError(msg) from exc

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as exc:
        msg = "LLM returned JSON that does not match the analysis schema."
        raise ResponseValidationError(
            msg, detail=exc.errors(include_url=False, include_context=False)
        ) from exc


class AsyncAnalysisClient:
    r"""Asynchronous context manager for the LLM analysis backend.

    Args:
        api_key: The bearer token sent to the backend.
        model: The model name.
        base_url: The base URL of the OpenAI-compatible API.
        retry_config: Optional retry configuration for the completion
            call. If ``None``, a default RetryConfig is used. Scheduled
            retries are logged at WARNING level in addition to any
            ``on_attempt`` observer of the config.
        temperature: Sampling temperature of the completion.
        transport: Optional httpx transport (e.g. ``httpx.MockTransport``).

    Example:
        ```pycon
        >>> import asyncio
        >>> from legacylens.analysis.client import AsyncAnalysisClient
        >>> from legacylens.analysis.models import SourceFile
        >>> async def main():  # doctest: +SKIP
        ...     async with AsyncAnalysisClient(api_key="sk-...") as client:
        ...         return await client.analyze(
        ...             [SourceFile(name="schema.sql", type="sql", content="CREATE TABLE t (id int)")]
        ...         )
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        retry_config: RetryConfig | None = None,
        temperature: float = 0.1,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self._api_key = api_key
        self._transport = transport

        retry_config = retry_config if retry_config is not None else RetryConfig()
        self._user_on_attempt = retry_config.on_attempt
        self._executor = AsyncRetryExecutor(retry_config.merge(on_attempt=self._log_attempt))

        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Self:
        """Enter the async context manager and create the underlying
        httpx client."""
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        # Deadlines are enforced per attempt by the retry executor
        self._client = httpx.AsyncClient(
            base_url=self.base_url, headers=headers, timeout=None, transport=self._transport
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the async context manager and close the underlying httpx
        client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = (
                "AsyncAnalysisClient must be used within an async context manager "
                "(async with AsyncAnalysisClient(...) as client:)"
            )
            raise RuntimeError(msg)
        return self._client

    def _log_attempt(self, info: AttemptInfo) -> None:
        logger.warning(
            f"Analysis request failed ({type(info.error).__name__}: {info.error}), "
            f"retrying attempt {info.next_attempt} in {info.delay_ms}ms"
        )
        if self._user_on_attempt is not None:
            self._user_on_attempt(info)

    def build_payload(
        self, files: Sequence[SourceFile], max_chars: int = DEFAULT_MAX_CHARS
    ) -> dict[str, Any]:
        """Build the chat completion request body."""
        return {
            "model": self.model,
            "response_format": {"type": "json_object"},
            "temperature": self.temperature,
            "messages": build_messages(files, max_chars),
        }

    async def complete(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Send a chat completion request with automatic retry logic.

        Args:
            payload: The request body.

        Returns:
            The decoded completion body.

        Raises:
            httpx.HTTPStatusError: If the backend answers with an error
                status that is terminal or persists after all retries.
            httpx.RequestError: If a transport error persists.
            AttemptTimeoutError: If the last attempt timed out.
            UpstreamResponseError: If the response body is not JSON.
        """
        client = self._ensure_client()

        async def post_completion(signal: CancellationSignal) -> httpx.Response:
            # A timed out attempt is aborted by cancelling its task
            response = await client.post("/chat/completions", json=payload)
            response.raise_for_status()
            return response

        response = await self._executor.execute(post_completion)
        try:
            return response.json()
        except ValueError as exc:
            msg = "LLM backend returned a non-JSON body."
            raise UpstreamResponseError(msg) from exc

    async def analyze(
        self, files: Sequence[SourceFile], max_chars: int = DEFAULT_MAX_CHARS
    ) -> AnalysisResult:
        """Analyze the given files.

        Args:
            files: The ingested source files.
            max_chars: The size limit of each prompt section.

        Returns:
            The validated analysis result.

        Raises:
            UpstreamResponseError: If the answer is not JSON.
            ResponseValidationError: If the answer does not match the
                result schema.
        """
        logger.debug(f"Analyzing {len(files)} file(s) with {self.model}")
        completion = await self.complete(self.build_payload(files, max_chars))
        return parse_analysis_result(completion)
