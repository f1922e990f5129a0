"""structlog setup for studyschedule.

Storage, controller and transfer modules log schedule events (saves, skipped
records, malformed timestamps) through get_logger(). Command output stays on
print() / the rich console; log lines go to stderr so they never mix with
exported or listed data on stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from studyschedule.config import LoggingConfig


def setup_logging(cfg: LoggingConfig) -> None:
    """Configure structlog from the `logging:` section of the config file.

    `cfg.json` switches from the console renderer to one JSON object per
    line. Unknown level names fall back to WARNING.
    """
    level = getattr(logging, cfg.level.upper(), logging.WARNING)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.JSONRenderer() if cfg.json else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # requests / urllib3 log through the stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger carrying `logger=<name>` on every line."""
    return structlog.get_logger().bind(logger=name)
