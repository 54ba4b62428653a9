"""Structured logging configuration."""

import logging
import re
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

from attendly.core.config import settings

REDACTED = "***REDACTED***"

# Bound values SQLAlchemy appends to statement errors and tracebacks
SQL_PARAMETERS = re.compile(r"\[parameters: .*?\](?=\n|$)", re.DOTALL)


class SanitizingFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that redacts member and visitor PII from logs."""

    PII_FIELDS = {
        "password",
        "token",
        "secret",
        "api_key",
        "visitor_name",
        "visitor_contact",
        "contact",
        "phone",
        "email",
    }

    def process_log_record(self, log_record: dict[str, Any]) -> dict[str, Any]:
        """Redact PII keys, and SQL parameter dumps inside any string value."""
        for key, value in list(log_record.items()):
            if any(pii_field in key.lower() for pii_field in self.PII_FIELDS):
                log_record[key] = REDACTED
            elif isinstance(value, str) and "[parameters: " in value:
                log_record[key] = SQL_PARAMETERS.sub(f"[parameters: {REDACTED}]", value)

        # Add standard fields
        log_record["service"] = settings.APP_NAME
        log_record["environment"] = settings.APP_ENV
        log_record["version"] = settings.APP_VERSION

        return log_record


def setup_logging() -> logging.Logger:
    """Set up structured logging with PII sanitization."""

    # Root logger
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if settings.APP_DEBUG else logging.INFO)

    # Remove existing handlers
    logger.handlers.clear()

    # Console handler with JSON formatting
    handler = logging.StreamHandler(sys.stdout)
    formatter = SanitizingFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Suppress noisy loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logger
