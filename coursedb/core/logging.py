"""structlog configuration shared by stores and services."""

from __future__ import annotations

import logging

import structlog

from .config import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog + stdlib logging from Settings."""
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(format="%(message)s", level=level)
    renderer = structlog.processors.JSONRenderer() if settings.log_json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
    )


def get_logger(name: str):
    return structlog.get_logger(name)
