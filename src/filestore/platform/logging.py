"""
Filestore Structured Logging

structlog setup shared by the API and library callers. Every event carries
the service name and environment; API requests additionally carry their
request id, method and path through contextvars.
"""

import logging
import sys
from typing import Any, MutableMapping, Optional

import structlog

from filestore.platform.config import Settings, get_settings

# Backend client libraries logging one line per HTTP call
CLIENT_LOGGERS = ("httpx", "httpcore")


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure structlog and the standard library root logger."""
    settings = settings or get_settings()
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            service_context(settings),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
            if settings.APP_ENV == "production"
            else structlog.dev.ConsoleRenderer(colors=settings.DEBUG),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    # IPFS / Elasticsearch calls are already logged by the DAO and the content store
    for name in CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def service_context(settings: Settings):
    """Processor adding the service name and environment to every event."""

    def add_service_context(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]):
        event_dict.setdefault("service", settings.APP_NAME)
        event_dict.setdefault("env", settings.APP_ENV)
        return event_dict

    return add_service_context


def bind_request_context(request_id: str, **values: Any) -> None:
    """Start a fresh logging context for one API request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
