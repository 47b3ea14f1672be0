"""
Logging configuration using structlog for structured logging.

stdout belongs to the credential helper protocol, so every log line is
written to stderr. Console rendering is the default; JSON output is
available for log collectors.
"""

import sys
from typing import Any

import structlog

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "access_token",
        "token",
        "secret",
        "authorization",
        "certificate",
    }
)

REDACTED = "***REDACTED***"


def _redacted(data: dict[str, Any]) -> dict[str, Any]:
    """Copy of ``data`` with sensitive values masked at every depth."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(key, str) and key.lower() in SENSITIVE_KEYS and value:
            result[key] = REDACTED
        elif isinstance(value, dict):
            result[key] = _redacted(value)
        else:
            result[key] = value
    return result


def redact_sensitive_data(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Mask values logged under credential-bearing keys.

    Nested dicts bound to the event are copied, never modified, since they
    may belong to the caller.

    Args:
        logger: The logger instance
        method_name: The name of the called method
        event_dict: The event dictionary to process

    Returns:
        A new event dictionary with sensitive values replaced
    """
    return _redacted(event_dict)


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structured logging on stderr.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of human-readable console output
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        processors += [
            structlog.processors.format_exc_info,
            redact_sensitive_data,
            structlog.processors.JSONRenderer(),
        ]
    else:
        # ConsoleRenderer formats exc_info itself
        processors += [
            redact_sensitive_data,
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
