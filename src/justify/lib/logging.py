"""Structlog configuration for the justify CLI.

Library modules log through stdlib `logging` so an embedding program keeps
control of its handlers. The CLI installs one stderr handler whose
`ProcessorFormatter` renders those records and structlog's own events with
the same processor chain, so `--log-json` and `-v` cover both.
"""

from __future__ import annotations

import logging as std_logging
import sys

import structlog

_LIBRARY_LOGGER = "justify"


def _level_from_verbosity(verbosity: int) -> int:
    if verbosity <= 0:
        return std_logging.WARNING
    if verbosity == 1:
        return std_logging.INFO
    return std_logging.DEBUG


def _shared_processors() -> list[structlog.typing.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def configure_logging(json_mode: bool = False, verbosity: int = 0) -> None:
    """Send every justify log line to stderr through one structlog renderer."""

    level = _level_from_verbosity(verbosity)
    renderer: structlog.typing.Processor = (
        structlog.processors.JSONRenderer() if json_mode else structlog.dev.ConsoleRenderer()
    )
    shared = _shared_processors()

    handler = std_logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    library_logger = std_logging.getLogger(_LIBRARY_LOGGER)
    library_logger.handlers[:] = [handler]
    library_logger.setLevel(level)
    library_logger.propagate = False

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
