"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from bill_tracker.config import settings


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

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_record_change(
    request_id: str,
    user_id: str,
    kind: str,
    action: str,
    record_id: str,
) -> None:
    """Log structured create/update/delete of a ledger record"""
    logging.info(
        "Record changed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "record_change",
            "record_kind": kind,
            "action": action,
            "record_id": record_id,
        },
    )


def log_dashboard(
    request_id: str,
    user_id: str,
    is_payment_period: bool,
    record_count: int,
    duration_ms: float,
) -> None:
    """Log dashboard computation for latency analysis"""
    logging.info(
        "Dashboard computed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "dashboard_complete",
            "cycle_phase": "payment" if is_payment_period else "accumulation",
            "record_count": record_count,
            "duration_ms": duration_ms,
        },
    )
