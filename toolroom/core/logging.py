# toolroom/core/logging.py
"""
structlog configuration.

Development renders colourful console lines, production renders one JSON
object per line. Sensitive keys are masked in both modes.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog
from structlog.types import EventDict, Processor

_SENSITIVE_KEYS = {"password", "token", "secret", "api_key", "authorization", "şifre", "parola"}

_configured = False


def add_timestamp(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_process_info(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["hostname"] = os.environ.get("HOSTNAME", "unknown")
    event_dict["pid"] = os.getpid()
    return event_dict


def mask_sensitive_data(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask values whose key looks like a credential."""

    def mask_value(value: Any) -> Any:
        if isinstance(value, str) and len(value) > 4:
            return f"{value[:2]}{'*' * (len(value) - 4)}{value[-2:]}"
        return "***"

    def mask_dict(d: dict[str, Any]) -> dict[str, Any]:
        masked = {}
        for key, value in d.items():
            if any(s in str(key).lower() for s in _SENSITIVE_KEYS):
                masked[key] = mask_value(value)
            elif isinstance(value, dict):
                masked[key] = mask_dict(value)
            else:
                masked[key] = value
        return masked

    return mask_dict(event_dict)


def drop_null_values(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    return {k: v for k, v in event_dict.items() if v is not None}


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog and the stdlib root logger. Safe to call twice."""
    global _configured

    log_level = getattr(logging, level.upper(), logging.INFO)

    common_processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_timestamp,
        add_process_info,
        mask_sensitive_data,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        processors = common_processors + [
            structlog.processors.format_exc_info,
            drop_null_values,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors = common_processors + [
            drop_null_values,
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if not _configured:
        logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    logging.getLogger().setLevel(log_level)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str | None = None, **kwargs: Any) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger(name)
    if kwargs:
        logger = logger.bind(**kwargs)
    return logger
