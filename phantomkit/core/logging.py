"""Structured logging for the ``phantom`` CLI — structlog over stdlib logging.

Only the ``phantomkit`` logger tree is configured. The root logger and any
host application's handlers are left alone, so importing the engine as a
library does not change how the embedding program logs.
"""

from __future__ import annotations

import logging
import sys

import structlog

from phantomkit import config

LOGGER_NAME = "phantomkit"


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging(level: str | None = None) -> None:
    """Route ``phantomkit.*`` events to stderr.

    Reads from environment variables:
        PHANTOMKIT_LOG_LEVEL  — log level (default: INFO); *level* overrides it
        PHANTOMKIT_LOG_FORMAT — console | json (default: console)

    stdout is left to command output. Calling this again replaces the handler.
    """
    log_level = (level or config.log_level()).upper()
    log_format = config.log_format()
    timestamp = "iso" if log_format == "json" else "%H:%M:%S"

    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt=timestamp, utc=log_format == "json"),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
        )
    )

    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(log_level)
    logger.propagate = False
