"""Logging setup: stdlib loggers rendered through structlog.

Every module logs with ``logging.getLogger(__name__)``. Records pick up the
structlog context of the task that emitted them, so the ``feed_source`` bound
by the sampling scheduler shows up on each line, in the JSON/console output
as a field and in the /api/logs buffer as a filterable column.
"""

from __future__ import annotations

import logging
import sys

import structlog

from power_monitor.config.schema import LoggingConfig
from power_monitor.dashboard.log_buffer import log_buffer

# Third-party loggers that would otherwise drown the per-tick lines
_QUIET_LOGGERS: dict[str, int] = {
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}


def _level(name: str, default: int = logging.INFO) -> int:
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else default


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _formatter(fmt: str) -> structlog.stdlib.ProcessorFormatter:
    processors: list[structlog.types.Processor] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if fmt == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    else:
        # JSON lines carry tracebacks as a string field
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return structlog.stdlib.ProcessorFormatter(foreign_pre_chain=_pre_chain(), processors=processors)


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Route all power_monitor logging through structlog.

    Installs a stdout handler, an optional file handler and the in-memory
    buffer on the root logger, replacing any handlers already there, then
    applies the quiet third-party levels and ``config.levels`` overrides.
    """
    config = config or LoggingConfig()

    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = _formatter(config.format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.file:
        handlers.append(logging.FileHandler(config.file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)

    # The buffer keeps plain messages; its own formatter is never replaced
    log_buffer.resize(config.buffer_capacity)
    handlers.append(log_buffer)

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(_level(config.level))

    for name, level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
    for name, level_name in config.levels.items():
        logging.getLogger(name).setLevel(_level(level_name, logging.NOTSET))
