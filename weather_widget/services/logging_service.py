"""Structured logging for the widget service.

Log lines are JSON with ISO timestamps and the request's correlation id.
Sensitive data is removed twice: fields whose names look like credentials are
replaced outright, and configured secret values (the forecast proxy key) are
scrubbed from every string field, URLs and error text included.
"""

import logging
import sys
from typing import Any, Dict, Iterable, Optional

import structlog

from weather_widget.models.state import FetchRequest, ViewState

REDACTED = "REDACTED"

SENSITIVE_KEY_PARTS = (
    "api_key",
    "api-key",
    "authorization",
    "secret",
    "password",
)


def redact_sensitive(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Replace fields whose names mark them as credentials.

    Matches api_key (forecast_api_key, X-Api-Key), authorization, and any
    name containing 'secret' or 'password'.
    """
    for key in list(event_dict.keys()):
        key_lower = key.lower()
        if any(part in key_lower for part in SENSITIVE_KEY_PARTS):
            event_dict[key] = REDACTED
    return event_dict


class SecretValueRedactor:
    """Processor that scrubs known secret values out of string fields."""

    def __init__(self, secrets: Iterable[str] = ()):
        self.secrets = tuple(s for s in secrets if s)

    def __call__(
        self, logger: Any, method_name: str, event_dict: Dict[str, Any]
    ) -> Dict[str, Any]:
        if not self.secrets:
            return event_dict
        for key, value in event_dict.items():
            if isinstance(value, str):
                for secret in self.secrets:
                    value = value.replace(secret, REDACTED)
                event_dict[key] = value
        return event_dict


def configure_logging(log_level: str = "INFO", secrets: Iterable[str] = ()) -> None:
    """Configure structlog for JSON output with correlation ID support.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        secrets: Literal values to scrub from every log line (e.g. the
            forecast proxy API key)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_sensitive,
            SecretValueRedactor(secrets),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger, bound to ``logger_name`` when a name is given."""
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger


def log_fetch_completed(
    request: FetchRequest,
    state: ViewState,
    duration_ms: float,
    logger: Optional[Any] = None,
) -> None:
    """Log how a provider fetch ended.

    Args:
        request: The fetch that just settled
        state: Widget state after the outcome was applied
        duration_ms: Time from issuing the call to applying its outcome
        logger: Logger to use, the 'widget' logger when omitted
    """
    logger = logger or get_logger("widget")
    stale = request.request_id != state.request_id
    logger.info(
        "forecast_fetch_completed",
        request_id=request.request_id,
        latest_request_id=state.request_id,
        lookup="coordinates" if request.by_coordinates else "query",
        query=request.query,
        succeeded=state.search.error is None and state.snapshot is not None,
        error=state.search.error,
        stale=stale,
        duration_ms=round(duration_ms, 1),
    )
