"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from spend_insights.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_insight(
    operation: str,
    user_id: str,
    source: str,
    cached: bool,
    duration_ms: float,
) -> None:
    """Log structured insight outcome"""
    logging.info(
        "Insight completed",
        extra={
            "operation": operation,
            "user_id": user_id,
            "step": "insight_complete",
            "source": source,
            "cached": cached,
            "duration_ms": duration_ms,
        },
    )


def log_provider_fallback(operation: str, provider: str, reason: str) -> None:
    """Log a discarded refinement attempt"""
    logging.warning(
        "Provider refinement discarded; using heuristic",
        extra={
            "operation": operation,
            "provider": provider,
            "step": "provider_fallback",
            "reason": reason,
        },
    )
