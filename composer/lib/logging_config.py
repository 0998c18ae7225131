"""Structured logging for composition diagnostics.

Composition events carry context fields such as the contract name, the slot
names and the synthesized type. ``log_with_context`` attaches them to the log
record and ``StructuredFormatter`` writes them out as top-level JSON keys:

    {"timestamp": "...", "level": "INFO", "logger": "composer.services...",
     "message": "Composed Greeter", "service": "composer",
     "contract": "Greeter", "slots": ["clock", "logger"],
     "synthesized_type": "GreeterInstance"}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional, TextIO

# Root of every logger in the package
PACKAGE_LOGGER = "composer"

# Record attribute naming the context fields attached by log_with_context
CONTEXT_FIELDS_ATTR = "composition_fields"


class StructuredFormatter(logging.Formatter):
    """JSON formatter emitting one object per composition event."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
        }

        for name in getattr(record, CONTEXT_FIELDS_ATTR, ()):
            log_data[name] = getattr(record, name)

        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(log_data, default=str)


def setup_logging(
    service_name: Optional[str] = None,
    level: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """Send the package's logs to ``stream`` as JSON lines.

    Only the ``composer`` logger is configured, so the host application's
    root logger is left alone. Calling this again replaces the handler.

    Args:
        service_name: Value of the ``service`` key (defaults to COMPOSER_SERVICE_NAME)
        level: Log level name (defaults to COMPOSER_LOG_LEVEL)
        stream: Output stream (defaults to stdout)

    Returns:
        The installed handler
    """
    from composer.lib.config_manager import config

    service_name = service_name or config.get("COMPOSER_SERVICE_NAME")
    level = level or config.get("COMPOSER_LOG_LEVEL")

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(StructuredFormatter(service_name))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(package_logger.handlers):
        if isinstance(existing.formatter, StructuredFormatter):
            package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, level.upper()))

    return handler


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    contract: str,
    **fields: Any,
) -> None:
    """Log a composition event for ``contract`` with extra context fields.

    Args:
        logger: Logger instance
        level: Log level (debug, info, warning, error, critical)
        message: Log message
        contract: Name of the contract being composed
        **fields: More context, e.g. ``slots``, ``synthesized_type``, ``error``
    """
    context = {"contract": contract, **fields}
    extra = {**context, CONTEXT_FIELDS_ATTR: tuple(context)}

    getattr(logger, level.lower())(message, extra=extra)
