"""Structured logging for the sink process, built on structlog."""

from __future__ import annotations

import logging
import sys

import structlog

from .config import LoggingConfig
from .models import SinkRecord


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Route structlog and stdlib logging through one stdout handler.

    JSON lines by default (Kubernetes log shipping); set
    ``LOG_RENDER_JSON=false`` for the console renderer during development.
    Calling it again replaces the previous handler.
    """
    config = config or LoggingConfig()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer: structlog.types.Processor
    if config.render_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(config.level.upper())
    # aiokafka is chatty at INFO about group rebalances
    logging.getLogger("aiokafka").setLevel(max(root.level, logging.WARNING))


def bind_record_context(record: SinkRecord) -> None:
    """Attach the record's position to every log line until the next record."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        topic=record.topic,
        partition=record.partition,
        offset=record.offset,
    )
