r"""Define the exceptions raised by legacylens.

Two families live here:

- abort-class errors (``AbortError`` and its subclasses) that signal an
  attempt was cancelled, either because its deadline expired or because
  it was deliberately aborted. The default retry classifier treats them
  as transient.
- analysis errors (``AnalysisError`` and its subclasses) that carry the
  error code and HTTP status the service reports to its clients.
"""

from __future__ import annotations

__all__ = [
    "AbortError",
    "AnalysisError",
    "AttemptTimeoutError",
    "OperationAbortedError",
    "PayloadTooLargeError",
    "ResponseValidationError",
    "UpstreamResponseError",
]

from typing import Any


class AbortError(Exception):
    """Base class for errors raised when an operation is cancelled."""


class AttemptTimeoutError(AbortError):
    """Raised when a single attempt exceeds its deadline.

    The error carries no payload besides its ``kind`` marker, because
    there is no underlying error to preserve when a deadline fires.

    Example:
        ```pycon
        >>> from legacylens.exceptions import AttemptTimeoutError
        >>> err = AttemptTimeoutError()
        >>> err.kind
        'AttemptTimeout'
        >>> str(err)
        'AttemptTimeout'

        ```
    """

    kind = "AttemptTimeout"

    def __init__(self) -> None:
        super().__init__(self.kind)


class OperationAbortedError(AbortError):
    """Raised when an operation observes a deliberate external abort."""

    kind = "OperationAborted"

    def __init__(self, message: str = "OperationAborted") -> None:
        super().__init__(message)


class AnalysisError(Exception):
    r"""Base class for errors reported by the analysis service.

    Args:
        message: A human readable description of the failure.
        code: The machine readable error code (e.g. ``"BAD_JSON"``).
        status_code: The HTTP status the service answers with.
        detail: Optional structured detail (e.g. validation errors).

    Example:
        ```pycon
        >>> from legacylens.exceptions import AnalysisError
        >>> err = AnalysisError("boom", code="INTERNAL", status_code=500)
        >>> err.to_dict()
        {'error': 'INTERNAL', 'message': 'boom'}

        ```
    """

    default_code = "INTERNAL"
    default_status_code = 500

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        detail: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.status_code = status_code if status_code is not None else self.default_status_code
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body the service sends for this error."""
        body: dict[str, Any] = {"error": self.code, "message": self.message}
        if self.detail is not None:
            body["detail"] = self.detail
        return body


class PayloadTooLargeError(AnalysisError):
    """Raised when the submitted files exceed the payload byte limit."""

    default_code = "FILE_TOO_LARGE"
    default_status_code = 413


class UpstreamResponseError(AnalysisError):
    """Raised when the LLM backend answers with something that is not
    JSON."""

    default_code = "BAD_UPSTREAM"
    default_status_code = 502


class ResponseValidationError(AnalysisError):
    """Raised when the LLM answer does not match the analysis result
    schema."""

    default_code = "BAD_JSON"
    default_status_code = 422
