import logging
import os
import sys

import structlog
from opentelemetry.instrumentation.logging import LoggingInstrumentor

# Keys whose values must never reach a log line
SENSITIVE_KEYS = frozenset(
    {"client_secret", "clientSecret", "access_token", "authorization", "password"}
)


def get_log_level():
    """Get log level from environment or default to INFO"""
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_log_renderer():
    """JSON for test and production, pretty console output for local runs."""
    env = os.getenv("ENVIRONMENT", "development")
    if env in ["test", "production"]:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True, sort_keys=False)


def redact_secrets(logger, method_name, event_dict):
    """Mask credential material bound to a log event."""
    for key in event_dict.keys() & SENSITIVE_KEYS:
        event_dict[key] = "***"
    return event_dict


def configure_logging():
    """Set up structlog on top of stdlib logging + OTEL context injection."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_secrets,
            structlog.processors.format_exc_info,
            get_log_renderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Tests read stdout, everything else goes to stderr
    stream = sys.stdout if os.getenv("ENVIRONMENT") == "test" else sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(get_log_level())

    logging.getLogger("uvicorn.error").handlers.clear()
    logging.getLogger("uvicorn.access").handlers.clear()

    LoggingInstrumentor().instrument(set_logging_format=False)


class BusinessEvents:
    """Standard names for storefront business event logs"""

    API_ENTRY = "api.request"
    CREDENTIALS_VALIDATED = "credentials.validated"
    CREDENTIALS_REJECTED = "credentials.rejected"
    PRODUCT_CREATED = "product.created"
    ORDER_CREATED = "order.created"
    PAYMENT_ATTEMPT = "payment.attempt"
    PAYMENT_SUCCESS = "payment.success"
    PAYMENT_PENDING = "payment.pending"
    PAYMENT_FAILURE = "payment.failure"
    GATEWAY_ERROR = "gateway.error"


configure_logging()
