"""Structured logging configuration for the DSA check manager.

Logging uses structlog. Human-readable console output is meant for
development (``DSA_MANAGER_DEBUG=true``), JSON lines for everything
else. The level comes from ``DSA_MANAGER_LOG_LEVEL``.

The command entry points call setup_logging with their settings, so a
front-end only needs to build its Settings. Library users that call the
engine directly call setup_logging once themselves.

Example:
    >>> from dsa_manager.core.logging import get_logger, setup_logging
    >>> setup_logging()
    >>> logger = get_logger(__name__)
    >>> logger.info("Check resolved", check="Klettern", passed=True)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

from dsa_manager.core.config import Settings, get_settings


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


_active: tuple[str, bool, str, str | None] | None = None


def app_context(app_name: str, app_version: str | None = None) -> Processor:
    """Build a processor that tags every entry with the application.

    Args:
        app_name: Value for the ``app`` key.
        app_version: Value for the ``version`` key, omitted when None.

    Returns:
        A structlog processor.
    """

    def add_app_context(
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict["app"] = app_name
        if app_version is not None:
            event_dict["version"] = app_version
        return event_dict

    return add_app_context


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    app_name: str = "dsa_manager",
    app_version: str | None = None,
) -> None:
    """Configure structlog for the whole process.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, render JSON lines instead of console output.
        app_name: Application name added to every entry.
        app_version: Application version added to every entry.
    """
    global _active

    numeric_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        app_context(app_name, app_version),
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    # loggers are module-level proxies; caching would pin the first configuration
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    _active = (level.upper(), json_format, app_name, app_version)


def setup_logging(settings: Settings | None = None) -> None:
    """Apply the logging configuration from settings.

    Reconfigures structlog only when the level, format or application
    tags differ from the active configuration, so it is cheap to call
    on every command.

    Args:
        settings: Settings to apply; defaults to the application settings.
    """
    settings = settings or get_settings()
    wanted = (
        settings.log_level,
        settings.is_production,
        settings.app_name,
        settings.app_version,
    )
    if wanted == _active:
        return
    configure_logging(
        level=settings.log_level,
        json_format=settings.is_production,
        app_name=settings.app_name,
        app_version=settings.app_version,
    )


def reset_logging() -> None:
    """Restore structlog defaults and forget the active configuration."""
    global _active
    structlog.reset_defaults()
    _active = None


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables that will be included in all subsequent logs.

    Example:
        >>> bind_context(character="Alrik", command="skill")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "app_context",
    "configure_logging",
    "setup_logging",
    "reset_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
