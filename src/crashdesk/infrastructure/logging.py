"""structlog wiring for crashdesk.

Every module obtains its logger through :func:`get_logger`; output is routed
through the stdlib root logger so a host application can attach its own
handlers alongside the ones installed here.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import structlog
from structlog.typing import Processor

if TYPE_CHECKING:
    from crashdesk.config.settings import LoggingSettings

LOG_FORMAT_TEXT = "text"
LOG_FORMAT_JSON = "json"

BoundLogger = structlog.stdlib.BoundLogger

_SHARED_PROCESSORS: tuple[Processor, ...] = (
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
)


def _renderer(log_format: str) -> Processor:
    if log_format == LOG_FORMAT_JSON:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=False)


def _install_handler(root: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)


def _rotating_file_handler(file_path: str, settings: "LoggingSettings") -> RotatingFileHandler:
    target = Path(file_path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        target,
        maxBytes=settings.max_bytes,
        backupCount=settings.backup_count,
        encoding="utf-8",
    )


def configure_logging(settings: "LoggingSettings") -> None:
    """Route crashdesk events to stderr and, optionally, a rotating log file.

    Calling this again replaces the previous handlers, so the CLI can
    reconfigure after resolving overrides.
    """

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(settings.level)

    _install_handler(root, logging.StreamHandler(sys.stderr), settings.level)
    if settings.file_path:
        _install_handler(root, _rotating_file_handler(settings.file_path, settings), settings.level)

    # module-level loggers are created at import time, before configuration
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, _renderer(settings.format)],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> BoundLogger:
    return structlog.get_logger(name)


def log_event(
    logger: BoundLogger,
    event: str,
    *,
    level: int = logging.INFO,
    message: Optional[str] = None,
    **fields: Any,
) -> None:
    """Emit ``event`` as ``event_name`` with every non-``None`` field bound."""

    present = {key: value for key, value in fields.items() if value is not None}
    logger.bind(event_name=event, **present).log(level, message or event)


__all__ = [
    "BoundLogger",
    "LOG_FORMAT_JSON",
    "LOG_FORMAT_TEXT",
    "configure_logging",
    "get_logger",
    "log_event",
]
