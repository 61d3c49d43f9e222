"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from cashflow_planner.config import settings


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
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_projection(
    request_id: str,
    user_id: str,
    days: int,
    negative_days: int,
    lowest_balance_cents: int,
    duration_ms: float,
) -> None:
    """Log projection outcome for analysis"""
    logging.info(
        "Projection built",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "projection_complete",
            "days": days,
            "negative_days": negative_days,
            "lowest_balance_cents": lowest_balance_cents,
            "duration_ms": duration_ms,
        },
    )


def log_spending_limit(
    request_id: str,
    user_id: str,
    daily_limit_cents: int,
    shortfall_reason: str | None,
    duration_ms: float,
) -> None:
    """Log spending limit outcome for analysis"""
    logging.info(
        "Spending limit calculated",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "spending_limit_complete",
            "daily_limit_cents": daily_limit_cents,
            "shortfall_reason": shortfall_reason or "none",
            "duration_ms": duration_ms,
        },
    )
