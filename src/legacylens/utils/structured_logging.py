r"""Logging configuration and JSON formatting for the analysis service.

The service tags every HTTP request with a correlation id stored in a
context variable. ``StructuredFormatter`` emits one JSON object per
record and includes that id, so the retries of one ``/analyze`` call can
be followed in a log aggregator.

Example:
    ```python
    import logging
    from legacylens.utils.structured_logging import configure_logging, set_correlation_id

    configure_logging("DEBUG", structured=True)
    set_correlation_id("req-123")
    logging.getLogger("legacylens").info("analysis started")
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
]

import contextvars
import json
import logging
import time
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "legacylens_correlation_id", default=None
)

# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

_PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_correlation_id() -> str | None:
    """Get the correlation id of the current context.

    Returns:
        The current correlation id, or None if not set.
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> contextvars.Token:
    """Set the correlation id for the current context.

    Args:
        correlation_id: The id to attach to subsequent log records
            (e.g. the ``X-Request-ID`` of the HTTP request).

    Returns:
        A token that can be passed to ``clear_correlation_id`` to
        restore the previous value.

    Example:
        ```pycon
        >>> from legacylens.utils.structured_logging import (
        ...     get_correlation_id,
        ...     set_correlation_id,
        ... )
        >>> token = set_correlation_id("req-456")
        >>> get_correlation_id()
        'req-456'

        ```
    """
    return _correlation_id.set(correlation_id)


def clear_correlation_id(token: contextvars.Token | None = None) -> None:
    """Clear the correlation id of the current context.

    Args:
        token: Optional token returned by ``set_correlation_id``. If
            given, the previous value is restored instead of ``None``.
    """
    if token is not None:
        _correlation_id.reset(token)
    else:
        _correlation_id.set(None)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Each record becomes a JSON object with the fields ``timestamp``,
    ``level``, ``logger``, ``message``, ``module``, ``function`` and
    ``line``, plus ``correlation_id`` when set, ``exception`` when the
    record carries exception info, and any field passed through
    ``extra``.

    Example:
        ```pycon
        >>> import json, logging
        >>> from legacylens.utils.structured_logging import StructuredFormatter
        >>> record = logging.makeLogRecord(
        ...     {"name": "demo", "levelname": "INFO", "msg": "hello", "attempt": 2}
        ... )
        >>> data = json.loads(StructuredFormatter().format(record))
        >>> data["message"], data["attempt"]
        ('hello', 2)

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        correlation_id = get_correlation_id()
        if correlation_id is not None:
            log_data["correlation_id"] = correlation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format the record timestamp as ISO 8601 UTC with milliseconds."""
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def configure_logging(level: str | int = "INFO", *, structured: bool = False) -> logging.Handler:
    """Attach a stream handler to the ``legacylens`` logger.

    Calling it again replaces the handler installed by the previous
    call.

    Args:
        level: The log level name or number.
        structured: If ``True``, emit JSON lines with
            ``StructuredFormatter``; otherwise use a plain text format.

    Returns:
        The installed handler.
    """
    logger = logging.getLogger("legacylens")
    for handler in list(logger.handlers):
        if getattr(handler, "_legacylens_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter() if structured else logging.Formatter(_PLAIN_FORMAT))
    handler._legacylens_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return handler
