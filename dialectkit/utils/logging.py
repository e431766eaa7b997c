"""Logging helpers for dialectkit.

Modules obtain loggers through :func:`get_logger`, which keeps them under the
``dialectkit`` namespace. Records emitted through :func:`log_with_context`
carry structured fields (``engine``, ``operation``, ``context``, ``offset``)
that :class:`StructuredFormatter` writes as top-level JSON keys. A correlation
ID set with :func:`correlation_scope` lets a host tie together every record
produced while one script is split or one schema change is rendered.
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from dialectkit._serialization import encode_json
from dialectkit.exceptions import ImproperConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from logging import LogRecord
    from typing import TextIO

__all__ = (
    "ROOT_LOGGER_NAME",
    "CorrelationIDFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_scope",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
    "set_correlation_id",
)

ROOT_LOGGER_NAME = "dialectkit"
FIELDS_ATTRIBUTE = "dialectkit_fields"

_correlation_id: ContextVar[str | None] = ContextVar("dialectkit_correlation_id", default=None)


def set_correlation_id(correlation_id: str | None) -> None:
    _correlation_id.set(correlation_id)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Run a block under a correlation ID.

    An ID that is already active is kept, so nested scopes (a driver call made
    while the host is tracking a request) share the outer ID. Otherwise
    *correlation_id* is used, or a fresh one is generated.

    Yields:
        The correlation ID in effect inside the block.
    """
    current = _correlation_id.get()
    if current is not None:
        yield current
        return
    token = _correlation_id.set(correlation_id or uuid.uuid4().hex)
    try:
        yield _correlation_id.get()  # type: ignore[misc]
    finally:
        _correlation_id.reset(token)


class CorrelationIDFilter(logging.Filter):
    """Stamp records with the active correlation ID."""

    def filter(self, record: LogRecord) -> bool:
        correlation_id = _correlation_id.get()
        if correlation_id is not None:
            record.correlation_id = correlation_id  # type: ignore[attr-defined]
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per record.

    Structured fields attached by :func:`log_with_context` become top-level
    keys; they never overwrite the base keys.
    """

    def __init__(self, *, include_location: bool = False) -> None:
        super().__init__()
        self.include_location = include_location

    def format(self, record: LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.include_location:
            entry["location"] = f"{record.module}:{record.funcName}:{record.lineno}"

        correlation_id = getattr(record, "correlation_id", None) or _correlation_id.get()
        if correlation_id is not None:
            entry["correlation_id"] = correlation_id

        for key, value in getattr(record, FIELDS_ATTRIBUTE, {}).items():
            entry.setdefault(key, value)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return encode_json(entry)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger in the ``dialectkit`` namespace.

    ``get_logger("registry")`` and ``get_logger("dialectkit.registry")`` name
    the same logger; with no name the package logger is returned.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIDFilter) for f in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def log_with_context(logger: logging.Logger, level: int, message: str, *args: Any, **fields: Any) -> None:
    """Log *message* with structured *fields* attached to the record.

    Positional *args* are %-format arguments for *message*, as with
    :meth:`logging.Logger.log`.
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, *args, extra={FIELDS_ATTRIBUTE: fields}, stacklevel=2)


def _parse_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        msg = f"Unknown logging level {level!r}"
        raise ImproperConfigurationError(msg)
    return resolved


def configure_logging(
    level: int | str = "INFO",
    format_style: str = "structured",
    stream: TextIO | None = None,
    extra_handlers: Iterable[logging.Handler] = (),
) -> logging.Logger:
    """Attach handlers to the package logger, replacing any installed earlier.

    Args:
        level: Level name or number for the package logger.
        format_style: ``"structured"`` for JSON lines, ``"simple"`` for plain text.
        stream: Stream for the console handler; standard error when omitted.
        extra_handlers: Further handlers, added as given.

    Raises:
        ImproperConfigurationError: On an unknown level or format style.

    Returns:
        The package logger.
    """
    formatter: logging.Formatter
    if format_style == "structured":
        formatter = StructuredFormatter()
    elif format_style == "simple":
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    else:
        msg = f"Unknown log format style {format_style!r}; expected 'structured' or 'simple'"
        raise ImproperConfigurationError(msg)

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(_parse_level(level))
    package_logger.handlers.clear()

    console = logging.StreamHandler(stream or sys.stderr)
    console.setFormatter(formatter)
    package_logger.addHandler(console)
    for handler in extra_handlers:
        package_logger.addHandler(handler)
    package_logger.propagate = False
    return package_logger
