# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging setup for the corrocli command line.

Log events go to stderr so that stdout carries only corrosion output and
decoded records. The level comes from ``--log-level`` or CORROSION_LOG_LEVEL.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

from corrocli.exceptions import ConfigurationError

if TYPE_CHECKING:
    from corrocli.settings import Settings

__all__ = ["LOG_LEVELS", "configure_logging", "get_logger"]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(settings: Settings | None = None, level: str | None = None) -> None:
    """Configure structlog for corrocli.

    Args:
        settings: Settings instance (created if None)
        level: Explicit level name, overrides settings.log_level

    Raises:
        ConfigurationError: If the level name is not one of LOG_LEVELS
    """
    if level is None:
        if settings is None:
            from corrocli.settings import Settings

            settings = Settings()
        level = settings.log_level

    name = level.upper()
    if name not in LOG_LEVELS:
        raise ConfigurationError(f"Unknown log level: {level} (expected one of {', '.join(LOG_LEVELS)})")
    log_level = getattr(logging, name)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)
    """
    return structlog.get_logger(name)
