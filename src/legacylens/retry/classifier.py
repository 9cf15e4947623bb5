r"""Default classification of errors as retriable or terminal.

An error is considered transient when it is an abort (including a
per-attempt timeout), when it carries one of a few low-level transport
codes, or when it carries an HTTP status of 429 or 5xx. Everything else
is terminal.
"""

from __future__ import annotations

__all__ = [
    "extract_status_code",
    "extract_transport_code",
    "is_abort_error",
    "is_retriable_error",
]

import errno
import logging
import socket
from typing import TYPE_CHECKING

import httpx

from legacylens.core.config import RETRIABLE_TRANSPORT_CODES, RETRY_STATUS_CODES
from legacylens.exceptions import AbortError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger: logging.Logger = logging.getLogger(__name__)

_ERRNO_NAMES: dict[int, str] = {
    errno.ETIMEDOUT: "ETIMEDOUT",
    errno.ECONNRESET: "ECONNRESET",
    errno.ENETUNREACH: "ENETUNREACH",
}

# Only checked on socket.gaierror, whose errno values overlap ordinary ones
_EAI_AGAIN: int | None = getattr(socket, "EAI_AGAIN", None)

_MAX_CHAIN_DEPTH = 8


def _iter_error_chain(error: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen and len(seen) < _MAX_CHAIN_DEPTH:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def is_abort_error(error: BaseException) -> bool:
    """Indicate if the error marks a cancellation or an abort.

    Args:
        error: The error to inspect.

    Returns:
        ``True`` for ``AbortError`` subclasses (which include
        ``AttemptTimeoutError``), the builtin ``TimeoutError`` and
        ``httpx.TimeoutException``.

    Example:
        ```pycon
        >>> from legacylens.exceptions import AttemptTimeoutError
        >>> from legacylens.retry.classifier import is_abort_error
        >>> is_abort_error(AttemptTimeoutError())
        True
        >>> is_abort_error(ValueError("nope"))
        False

        ```
    """
    return isinstance(error, (AbortError, TimeoutError, httpx.TimeoutException))


def extract_transport_code(error: BaseException) -> str | None:
    """Find a retriable low-level transport code on the error or its
    causes.

    The string attribute ``code`` and the numeric ``errno`` of OS errors
    are both inspected, following the ``__cause__``/``__context__`` chain
    so that transport errors wrapped by httpx are recognized.

    Args:
        error: The error to inspect.

    Returns:
        The symbolic code (e.g. ``"ECONNRESET"``) or ``None``.

    Example:
        ```pycon
        >>> from legacylens.retry.classifier import extract_transport_code
        >>> extract_transport_code(ConnectionResetError(104, "reset"))
        'ECONNRESET'
        >>> extract_transport_code(ValueError("nope")) is None
        True

        ```
    """
    for link in _iter_error_chain(error):
        code = getattr(link, "code", None)
        if isinstance(code, str) and code in RETRIABLE_TRANSPORT_CODES:
            return code
        err_no = getattr(link, "errno", None)
        if not isinstance(err_no, int):
            continue
        if isinstance(link, socket.gaierror):
            if _EAI_AGAIN is not None and err_no == _EAI_AGAIN:
                return "EAI_AGAIN"
            continue
        if err_no in _ERRNO_NAMES:
            return _ERRNO_NAMES[err_no]
    return None


def extract_status_code(error: BaseException) -> int | None:
    """Read the HTTP-like status code carried by an error.

    Args:
        error: The error to inspect.

    Returns:
        The value of ``status_code``, ``status`` or
        ``response.status_code`` (in that order), or ``None``.

    Example:
        ```pycon
        >>> from legacylens.retry.classifier import extract_status_code
        >>> err = RuntimeError("rate limit")
        >>> err.status = 429
        >>> extract_status_code(err)
        429

        ```
    """
    for candidate in (
        getattr(error, "status_code", None),
        getattr(error, "status", None),
        getattr(getattr(error, "response", None), "status_code", None),
    ):
        if isinstance(candidate, int) and not isinstance(candidate, bool):
            return candidate
    return None


def is_retriable_error(error: BaseException) -> bool:
    """Default predicate deciding whether an error is worth a retry.

    Args:
        error: The error raised by an attempt.

    Returns:
        ``True`` if the error is an abort or timeout, carries a
        retriable transport code, or carries an HTTP status of 429 or
        in 500-599. ``False`` otherwise.

    Example:
        ```pycon
        >>> from legacylens.retry.classifier import is_retriable_error
        >>> err = RuntimeError("server error")
        >>> err.status_code = 503
        >>> is_retriable_error(err)
        True
        >>> err.status_code = 400
        >>> is_retriable_error(err)
        False

        ```
    """
    if is_abort_error(error):
        return True
    if extract_transport_code(error) is not None:
        return True
    status_code = extract_status_code(error)
    if status_code is not None and status_code in RETRY_STATUS_CODES:
        return True
    logger.debug(f"{type(error).__name__} is not retriable: {error}")
    return False
