"""structlog setup for bsexport.

Module loggers are created at import time and stay lazy, so the level and
renderer chosen on the command line apply to all of them.
"""

import logging
import sys
from typing import Literal

import structlog


LOG_LEVELS = {
    name: getattr(logging, name) for name in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
}


def configure_logging(
    level: str = "WARNING",
    format: Literal["console", "json"] = "console",
) -> None:
    """Configure structlog for an export run.

    Logs go to stderr so they never mix with the console prompts on stdout.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format - "console" for human-readable, "json" for machine-readable
    """
    log_level = LOG_LEVELS.get(level.upper(), logging.WARNING)

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if format == "json":
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a lazy structured logger for a module.

    Modules call this at import time, before the CLI has parsed
    --log-level and --log-format. The name stays on the lazy proxy so the
    logger picks up whatever configure_logging() sets later.

    Args:
        name: Optional logger name bound as ``logger_name``
    """
    if name:
        return structlog.get_logger(logger_name=name)
    return structlog.get_logger()
