"""Structlog configuration for the application.

Configures structlog with colored console output for development
and JSON output for production. Secret-bearing fields are masked before
any renderer sees them.
"""

import logging
import os
import sys
from typing import Any

import structlog

# Event keys whose values must never reach a log sink
SENSITIVE_KEYS = frozenset(
    {
        "api_key",
        "raw_key",
        "new_raw_key",
        "presented_key",
        "encrypted_key",
        "master_key",
        "password",
    }
)

REDACTED = "***"


def redact_sensitive_values(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor replacing sensitive values with a fixed mask."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def configure_logging(debug: bool = False) -> None:
    """Configure structlog with appropriate processors.

    Uses colored console output for development (when FORCE_COLOR is set
    or running in a TTY), otherwise uses JSON output for production.

    Args:
        debug: Emit debug-level events when True, info and above otherwise
    """
    # FORCE_COLOR=1 enables colors even in non-TTY environments (like Docker)
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    is_tty = sys.stdout.isatty()
    use_colors = force_color or is_tty

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        redact_sensitive_values,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
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
