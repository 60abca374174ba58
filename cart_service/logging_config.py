"""
logging_config.py - JSON Logging Configuration

PURPOSE:
    Structured JSON logging for the cart service with timezone-aware
    timestamps and cart-specific context fields.

JSON LOG FIELDS:
    - timestamp: ISO 8601 in the configured timezone
    - level: Log level (INFO, ERROR, WARNING, DEBUG, CRITICAL)
    - logger: Module where the log originated (e.g. "cart_service.store")
    - message: The log message
    - service_name: Injected by setup_logging
    - cart_key: Optional storage key involved
    - generation: Optional cart state generation
    - event_type: Optional event being published
    - correlation_id: Optional tracing ID
    - exception: Stack trace (only when exc_info is set)

USAGE:
    from cart_service.logging_config import setup_logging
    setup_logging("cart-service", level="INFO")

    logger = logging.getLogger(__name__)
    logger.info("Cart loaded", extra={"cart_key": "@GoMarketplace:cart", "generation": 1})

EXAMPLE JSON OUTPUT:
    {
        "timestamp": "2026-02-23T22:48:51.001014-08:00",
        "level": "INFO",
        "logger": "cart_service.store",
        "message": "Added item 1 to cart",
        "service_name": "cart-service",
        "cart_key": "@GoMarketplace:cart",
        "generation": 1
    }
"""

import json
import logging
import sys
from datetime import datetime
from zoneinfo import ZoneInfo
from typing import Any, Dict

from cart_service.config import DEFAULT_TIMEZONE

CONTEXT_FIELDS = ("service_name", "cart_key", "generation", "event_type", "correlation_id")


class JsonFormatter(logging.Formatter):
    """Formatter that outputs JSON logs with cart context."""

    def __init__(self, timezone: str = DEFAULT_TIMEZONE):
        super().__init__()
        self.tz = ZoneInfo(timezone)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, self.tz).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ServiceFilter(logging.Filter):
    """Adds service_name to every record passing through the handler."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = self.service_name
        return True


def setup_logging(service_name: str, level: str = "INFO", timezone: str = DEFAULT_TIMEZONE) -> logging.Handler:
    """Setup JSON logging on the root logger. Repeated calls replace the previous handler."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(timezone))
    handler.addFilter(ServiceFilter(service_name))

    logger = logging.getLogger()
    logger.setLevel(level)
    for existing in list(logger.handlers):
        if isinstance(existing.formatter, JsonFormatter):
            logger.removeHandler(existing)
    logger.addHandler(handler)

    return handler
