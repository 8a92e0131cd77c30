"""
logging_config.py - Centralized JSON Logging Configuration

PURPOSE:
    Structured JSON logging for services, with timezone-aware timestamps and
    service-specific context injection.

JSON LOG FIELDS:
    - timestamp: ISO 8601 in the configured timezone (default UTC)
    - level: Log level (INFO, ERROR, WARNING, DEBUG, CRITICAL)
    - logger: Module where the log originated (e.g. "services.cart_service.cart_store")
    - message: The log message
    - service_name: Name of the service (injected automatically)
    - user_id / cart_id: Optional context passed through `extra=`
    - exception: Stack trace, only when exc_info is set

USAGE:
    from shared.logging_config import setup_logging
    setup_logging("cart-service", level="INFO")

    logger = logging.getLogger(__name__)
    logger.info("Cart created", extra={"user_id": "user123", "cart_id": "cart-..."})

EXAMPLE JSON OUTPUT:
    {
        "timestamp": "2026-10-19T20:48:51.001014+00:00",
        "level": "INFO",
        "logger": "services.cart_service.cart_service",
        "message": "Created cart cart-1792442931001-k3j9x0a for user user123",
        "service_name": "cart-service"
    }
"""

import json
import logging
import sys
from datetime import datetime
from typing import Any, Dict
from zoneinfo import ZoneInfo

CONTEXT_FIELDS = ("service_name", "user_id", "cart_id")


class JsonFormatter(logging.Formatter):
    """Formatter that renders each record as one JSON object."""

    def __init__(self, tz: str = "UTC"):
        super().__init__()
        self.tz = ZoneInfo(tz)

    def format(self, record: logging.LogRecord) -> str:
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

        return json.dumps(log_data)


class ServiceFilter(logging.Filter):
    """Stamps every record with the owning service's name."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = self.service_name
        return True


def setup_logging(service_name: str, level: str = "INFO", tz: str = "UTC") -> None:
    """Setup JSON logging on the root logger. Repeated calls replace the previous setup."""
    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        if isinstance(handler.formatter, JsonFormatter):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(tz))
    # Filters on the handler also see records propagated from child loggers.
    handler.addFilter(ServiceFilter(service_name))
    root.addHandler(handler)
