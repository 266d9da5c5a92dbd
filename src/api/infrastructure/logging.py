"""Structlog configuration for the application.

Colored console output when attached to a terminal, JSON lines otherwise.
"""

import logging
import os
import sys

import structlog


def _redact_authorization(
    _logger: object, _method: str, event_dict: dict
) -> dict:
    """Drop values that look like bearer credentials before rendering."""
    for key in ("token", "access_token", "authorization", "code_verifier"):
        if key in event_dict:
            event_dict[key] = "[redacted]"
    return event_dict


def configure_logging(debug: bool = False) -> None:
    """Configure structlog with appropriate processors.

    FORCE_COLOR=1 enables the console renderer outside a TTY (e.g. Docker).

    Args:
        debug: Emit debug-level events when True, info and above otherwise.
    """
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    use_colors = force_color or sys.stdout.isatty()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _redact_authorization,
    ]

    if use_colors:
        processors: list[structlog.types.Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
