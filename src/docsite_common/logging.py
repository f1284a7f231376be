"""Structured logging helpers with correlation IDs.

This module provides :class:`LoggerAdapter` for structured logging with the
``operation`` and ``status`` fields always present, a :class:`JsonFormatter`
that renders one JSON object per record, and module-level loggers guarded by a
``NullHandler`` so the library never configures handlers on its own.

Examples
--------
>>> from docsite_common.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("Sidebar built", extra={"operation": "sidebar.build", "status": "success"})
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any, Self, TextIO

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping
    from types import TracebackType

__all__ = [
    "CorrelationContext",
    "JsonFormatter",
    "LoggerAdapter",
    "get_logger",
    "setup_logging",
    "with_fields",
]

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_RECORD_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON documents.

    The payload always contains ``ts``, ``level``, ``name`` and ``message``.
    Structured fields passed through ``extra`` (or injected by
    :class:`LoggerAdapter`) are copied verbatim when they are JSON-friendly.

    Examples
    --------
    >>> import logging
    >>> handler = logging.StreamHandler()
    >>> handler.setFormatter(JsonFormatter())
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format ``record`` as JSON.

        Parameters
        ----------
        record : logging.LogRecord
            Record to render.

        Returns
        -------
        str
            JSON-encoded log entry.
        """
        data: dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if "correlation_id" not in record.__dict__:
            ctx_correlation_id = _correlation_id.get()
            if ctx_correlation_id is not None:
                data["correlation_id"] = ctx_correlation_id

        for key, value in record.__dict__.items():
            if (
                key not in _RESERVED_RECORD_KEYS
                and key not in data
                and not key.startswith("_")
                and value is not None
                and isinstance(value, (str, int, float, bool, list, dict))
            ):
                data[key] = value

        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str, ensure_ascii=False)


class LoggerAdapter(logging.LoggerAdapter[logging.Logger]):
    """Logger adapter that injects structured context fields.

    Fields bound at construction time are merged into every call's ``extra``
    without overriding values given explicitly at the call site. The
    correlation id is taken from context when not provided, and ``operation``
    and ``status`` are always present (``status`` is inferred from the level).

    Examples
    --------
    >>> from docsite_common.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.warning("Category skipped", extra={"category": "guides"})
    """

    def process(
        self, msg: object, kwargs: MutableMapping[str, Any]
    ) -> tuple[object, MutableMapping[str, Any]]:
        """Merge bound fields and context into ``kwargs['extra']``.

        Parameters
        ----------
        msg : object
            Log message.
        kwargs : MutableMapping[str, Any]
            Keyword arguments of the logging call.

        Returns
        -------
        tuple[object, MutableMapping[str, Any]]
            Message and kwargs with structured fields injected.
        """
        extra = dict(kwargs.get("extra") or {})
        for key, value in (self.extra or {}).items():
            extra.setdefault(key, value)
        if "correlation_id" not in extra:
            ctx_correlation_id = _correlation_id.get()
            if ctx_correlation_id is not None:
                extra["correlation_id"] = ctx_correlation_id
        extra.setdefault("operation", "unknown")
        kwargs["extra"] = extra
        return msg, kwargs

    def log(self, level: int, msg: object, *args: object, **kwargs: Any) -> None:
        """Log ``msg`` at ``level`` with a status inferred from the level."""
        if self.isEnabledFor(level):
            extra = dict(kwargs.get("extra") or {})
            if "status" not in extra and "status" not in (self.extra or {}):
                extra["status"] = _status_for_level(level)
            kwargs["extra"] = extra
            msg, kwargs = self.process(msg, kwargs)
            self.logger.log(level, msg, *args, **kwargs)


def _status_for_level(level: int) -> str:
    if level >= logging.ERROR:
        return "error"
    if level >= logging.WARNING:
        return "warning"
    return "success"


def get_logger(name: str) -> LoggerAdapter:
    """Return a structured logger adapter for ``name``.

    A ``NullHandler`` is attached when the underlying logger has no handlers
    so library code stays silent until the application calls
    :func:`setup_logging`.

    Parameters
    ----------
    name : str
        Logger name (typically ``__name__``).

    Returns
    -------
    LoggerAdapter
        Adapter with structured context injection.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return LoggerAdapter(logger, {})


def setup_logging(level: int | str = logging.INFO, *, stream: TextIO | None = None) -> None:
    """Configure the root logger with :class:`JsonFormatter`.

    Parameters
    ----------
    level : int | str, optional
        Threshold level, either numeric or a level name. Defaults to ``INFO``.
    stream : TextIO | None, optional
        Destination stream. Defaults to ``sys.stdout``.
    """
    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(JsonFormatter())
    resolved = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    logging.basicConfig(level=resolved, handlers=[handler], force=True)


class CorrelationContext:
    """Context manager that scopes a correlation id.

    Parameters
    ----------
    correlation_id : str | None
        Correlation id to activate; ``None`` clears it for the block.

    Examples
    --------
    >>> logger = get_logger(__name__)
    >>> with CorrelationContext("config-load-1"):
    ...     logger.info("Loading configuration")
    """

    def __init__(self, correlation_id: str | None) -> None:
        self.correlation_id = correlation_id
        self._token: contextvars.Token[str | None] | None = None

    def __enter__(self) -> Self:
        self._token = _correlation_id.set(self.correlation_id)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._token is not None:
            _correlation_id.reset(self._token)
        del exc_type, exc_val, exc_tb


class _WithFieldsContext(AbstractContextManager[LoggerAdapter]):
    """Context manager implementation for :func:`with_fields`."""

    def __init__(
        self, logger: logging.Logger | LoggerAdapter, fields: Mapping[str, object]
    ) -> None:
        self._logger = logger
        self._fields = dict(fields)
        self._token: contextvars.Token[str | None] | None = None

    def __enter__(self) -> LoggerAdapter:
        base_logger = (
            self._logger.logger if isinstance(self._logger, LoggerAdapter) else self._logger
        )
        bound: dict[str, object] = {}
        if isinstance(self._logger, LoggerAdapter):
            bound.update(self._logger.extra or {})
        bound.update(self._fields)
        correlation_id = bound.get("correlation_id")
        if isinstance(correlation_id, str):
            self._token = _correlation_id.set(correlation_id)
        return LoggerAdapter(base_logger, bound)

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._token is not None:
            _correlation_id.reset(self._token)
        del exc_type, exc_value, exc_tb


def with_fields(
    logger: logging.Logger | LoggerAdapter,
    **fields: object,
) -> AbstractContextManager[LoggerAdapter]:
    """Bind structured ``fields`` to every log entry inside a ``with`` block.

    Parameters
    ----------
    logger : logging.Logger | LoggerAdapter
        Base logger (may already be an adapter; its bound fields are kept).
    **fields : object
        Fields to inject, e.g. ``operation`` or ``category``.

    Returns
    -------
    AbstractContextManager[LoggerAdapter]
        Context manager yielding the bound adapter.

    Examples
    --------
    >>> logger = get_logger(__name__)
    >>> with with_fields(logger, operation="sidebar.build") as log:
    ...     log.info("Scanning categories")
    """
    return _WithFieldsContext(logger, fields)
