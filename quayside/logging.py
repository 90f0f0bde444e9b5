"""Logging helpers built on femtologging.

Quayside components never reach for a process-wide logger implicitly when
they emit domain events: they accept a :class:`SupportsLog` collaborator and
fall back to :func:`get_logger` only when none is injected. Messages are
formatted eagerly with percent-style interpolation so every backend receives
the same pre-rendered text.

Example:
>>> from quayside.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "Registry %s accepted", "registry.example.test")

"""

from __future__ import annotations

import enum
import typing as typ

from femtologging import basicConfig, get_logger


class LogLevel(enum.StrEnum):
    """Log levels understood by femtologging."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class SupportsLog(typ.Protocol):
    """Minimal logger interface accepted by Quayside components."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Normalize a raw log level string.

    Parameters
    ----------
    level : str | None
        Raw level, typically read from ``QUAYSIDE_LOG_LEVEL``.

    Returns
    -------
    tuple[str, bool]
        The normalized level and whether the input had to be replaced by the
        ``INFO`` fallback.

    """
    if not level:
        return ("INFO", True)

    normalized = level.strip().upper()
    if normalized in LogLevel.__members__:
        return (normalized, False)

    return ("INFO", True)


def configure_logging(level: str, *, force: bool = False) -> tuple[str, bool]:
    """Configure femtologging at ``level`` and return the normalized level."""
    normalized, invalid = normalize_log_level(level)
    basicConfig(level=normalized, force=force)
    return (normalized, invalid)


def format_log_message(template: str, *args: object) -> str:
    """Render ``template`` with percent-style interpolation."""
    return template % args if args else template


def log_at(
    logger: SupportsLog,
    level: str,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Format ``template`` and emit it on ``logger`` at ``level``.

    Parameters
    ----------
    logger : SupportsLog
        Destination logger.
    level : str
        femtologging level name.
    template : str
        Percent-style message template.
    *args : object
        Values interpolated into ``template``.
    exc_info : object | None, optional
        Exception attached to the record.

    """
    logger.log(
        level,
        format_log_message(template, *args),
        exc_info=exc_info,
        stack_info=False,
    )


def log_debug(
    logger: SupportsLog, template: str, *args: object, exc_info: object | None = None
) -> None:
    """Emit a DEBUG record."""
    log_at(logger, LogLevel.DEBUG, template, *args, exc_info=exc_info)


def log_info(
    logger: SupportsLog, template: str, *args: object, exc_info: object | None = None
) -> None:
    """Emit an INFO record."""
    log_at(logger, LogLevel.INFO, template, *args, exc_info=exc_info)


def log_warning(
    logger: SupportsLog, template: str, *args: object, exc_info: object | None = None
) -> None:
    """Emit a WARNING record."""
    log_at(logger, LogLevel.WARNING, template, *args, exc_info=exc_info)


def log_error(
    logger: SupportsLog, template: str, *args: object, exc_info: object | None = None
) -> None:
    """Emit an ERROR record."""
    log_at(logger, LogLevel.ERROR, template, *args, exc_info=exc_info)


def log_exception(logger: SupportsLog, message: str, exc: BaseException) -> None:
    """Emit an ERROR record carrying ``exc`` as its exception payload."""
    log_at(logger, LogLevel.ERROR, "%s", message, exc_info=exc)


__all__ = [
    "LogLevel",
    "SupportsLog",
    "configure_logging",
    "format_log_message",
    "get_logger",
    "log_at",
    "log_debug",
    "log_error",
    "log_exception",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
