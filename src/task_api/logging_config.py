"""
Logging configuration for the task API.

structlog renders events on top of the standard library logging tree, so
uvicorn and application records share one handler and one format.
"""
from __future__ import annotations

import logging
import sys

import structlog


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structlog and the root logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of human-readable console output
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter_processors = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if json_logs:
        formatter_processors.append(structlog.processors.format_exc_info)
    formatter_processors.append(renderer)
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=formatter_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    # Access lines are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

