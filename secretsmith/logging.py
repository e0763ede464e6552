"""
Structured logging configuration using structlog.

Standardized log format:
{
    "ts": "<ISO 8601 UTC timestamp>",
    "level": "info",
    "service": "secretsmith",
    "event": "secret.generated",
    "module": "secretsmith.services.crypto.token_generator",
    "function": "get_token_string",
    "line": 42,
    ...additional context...
}

Secret material is never passed to the logger; only kinds, lengths and
algorithm identifiers are.
"""
import structlog
import logging
from typing import Any


def add_service_name(service_name: str):
    """Build a processor that stamps the service name on every entry."""
    def processor(logger: Any, method_name: str, event_dict: dict) -> dict:
        event_dict["service"] = service_name
        return event_dict
    return processor


def add_module_info(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Add module, function, and line number to log entries."""
    frame = structlog._frames._find_first_app_frame_and_name()[0]
    if frame:
        event_dict["module"] = frame.f_globals.get("__name__", "unknown")
        event_dict["function"] = frame.f_code.co_name
        event_dict["line"] = frame.f_lineno
    return event_dict


def setup_logging(
    json_output: bool = True,
    service_name: str = "secretsmith",
    level: str = "INFO",
):
    """
    Configure structured logging with standardized fields.

    Args:
        json_output: If True, output JSON logs. If False, use console format.
        service_name: Name stamped on every entry.
        level: Minimum log level name (e.g. "DEBUG", "INFO").
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        add_service_name(service_name),
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        structlog.processors.add_log_level,
        add_module_info,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors = shared_processors + [
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
    )


def get_logger():
    """Get a configured structlog logger."""
    return structlog.get_logger()


def setup_logging_from_settings(settings=None):
    """Configure logging from LOG_JSON and LOG_LEVEL settings."""
    if settings is None:
        from .config import get_settings
        settings = get_settings()
    setup_logging(json_output=settings.LOG_JSON, level=settings.LOG_LEVEL)
