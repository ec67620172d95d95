import logging
import sys

import sentry_sdk
import structlog
from asgi_correlation_id.context import correlation_id
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from structlog.contextvars import merge_contextvars

from .config import Settings, get_settings

# Chatty third-party loggers that only matter when debugging
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "uvicorn.access")


def service_context(settings: Settings):
    def add_service_context(logger, method_name, event_dict):
        event_dict.setdefault("service", settings.SERVICE_NAME)
        event_dict.setdefault("env", settings.ENVIRONMENT)
        return event_dict

    return add_service_context


def add_correlation_id(logger, method_name, event_dict):
    cid = correlation_id.get(None)
    if cid is not None:
        event_dict["correlation_id"] = cid
        sentry_sdk.set_tag("correlation_id", cid)
    return event_dict


def init_sentry(settings: Settings) -> bool:
    if not settings.SENTRY_DSN:
        return False
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        integrations=[
            FastApiIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        send_default_pii=False,
    )
    sentry_sdk.set_tag("service", settings.SERVICE_NAME)
    return True


def configure_logging(settings: Settings | None = None) -> None:
    """Route structlog through stdlib logging and set up Sentry when a DSN is configured."""
    settings = settings or get_settings()
    log_level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    init_sentry(settings)

    use_json = settings.LOG_JSON if settings.LOG_JSON is not None else not settings.is_local
    renderer = structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer()

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if settings.DEBUG else logging.WARNING)

    structlog.configure(
        processors=[
            merge_contextvars,
            service_context(settings),
            add_correlation_id,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
