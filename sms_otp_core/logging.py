"""
Structured Logging
==================
structlog configuration shared by all OTP modules.

Usage:
    from sms_otp_core.logging import configure_logging, get_logger

    configure_logging(json_format=False, log_level="DEBUG")
    logger = get_logger(__name__)
    logger.info("otp_received", listener="sms_retriever")

OTP codes are never logged; phone numbers are masked with
``sms_otp_core.phone.mask_phone``.
"""

import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.types import EventDict, Processor

# Event fields that must never reach the log output
REDACTED_FIELDS = ("otp", "code", "signing_certificate")


def _redact_secrets(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace sensitive values with a placeholder."""
    for key in REDACTED_FIELDS:
        if key in event_dict and event_dict[key] is not None:
            event_dict[key] = "***"
    return event_dict


def configure_logging(json_format: bool = True, log_level: str = "INFO") -> None:
    """
    Configure structlog on top of stdlib logging.

    Args:
        json_format: JSON output (production) or console output (development)
        log_level: Minimum log level
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    pre_chain: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        _redact_secrets,
    ]

    if json_format:
        renderer: Processor = structlog.processors.JSONRenderer()
        pre_chain.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def configure_from_settings() -> None:
    """Configure logging from ``SMS_OTP_LOG_*`` settings."""
    from sms_otp_core.config import get_settings

    settings = get_settings()
    configure_logging(json_format=settings.log_json, log_level=settings.log_level)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger."""
    return structlog.get_logger(name)


def bind_contextvars(**kwargs: Any) -> None:
    """Bind values to every log line in the current context, e.g. a session id."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_contextvars() -> None:
    structlog.contextvars.clear_contextvars()
