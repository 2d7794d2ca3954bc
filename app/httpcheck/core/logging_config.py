"""Logging configuration for httpcheck.

Keep configuration generation separate from execution. The library itself
only ever calls `get_logger`; processes that own the logging setup (such as
the container probe) apply the configuration once at startup:

    - `get_logging_config`: Build a `logging.config.dictConfig` dictionary
      from the probe settings.
    - `configure_structlog_wrapper`: Route structlog through the stdlib
      handlers configured above.
    - `bind_contextvars` / `clear_contextvars`: Attach per-run metadata
      (e.g., the probe ID) to every log entry.
"""

from typing import Any

import structlog
from structlog.types import Processor

from httpcheck.config import Settings


# =============================================================================
# CONFIGURATION GENERATORS
# =============================================================================


def get_common_processors() -> list[Processor]:
    """Return the processors shared by the JSON and console renderers.

    Returns:
        list[Processor]: Ordered list of structlog processors.
    """
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def get_renderer(settings: Settings) -> Processor:
    """Select the final renderer for the deployment environment.

    Production and staging emit JSON for log aggregation; development emits
    colored console output.
    """
    if settings.ENVIRONMENT in ("production", "staging"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def get_logging_config(settings: Settings) -> dict[str, Any]:
    """Generate a logging configuration dictionary for `logging.config.dictConfig`.

    Note:
        This is a pure function that does not modify global state.

    Args:
        settings: Probe settings containing LOG_LEVEL, ENVIRONMENT and
            LOGGING_NOISY_MODULES.

    Returns:
        dict[str, Any]: Configuration dictionary compatible with dictConfig.
    """
    log_level = settings.LOG_LEVEL.upper()

    noisy_loggers = {
        name: {"level": "WARNING", "propagate": False}
        for name in settings.LOGGING_NOISY_MODULES
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "structlog.stdlib.ProcessorFormatter",
                "processor": get_renderer(settings),
                "foreign_pre_chain": get_common_processors(),
            },
        },
        "handlers": {
            "console": {
                "level": log_level,
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": True,
            },
            **noisy_loggers,
        },
    }


def configure_structlog_wrapper(settings: Settings) -> None:
    """Configure structlog to hand events over to the stdlib formatter.

    Args:
        settings: Probe settings (reserved for future configuration).
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *get_common_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# =============================================================================
# LOGGER RETRIEVAL
# =============================================================================


def get_logger(name: str | None = None) -> Any:
    """Retrieve a structlog logger instance.

    Args:
        name: Optional logger name. If omitted, return the root logger.

    Returns:
        A bound structlog logger instance.
    """
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()


# =============================================================================
# CONTEXT VARIABLE EXPORTS
# =============================================================================

bind_contextvars = structlog.contextvars.bind_contextvars
clear_contextvars = structlog.contextvars.clear_contextvars
